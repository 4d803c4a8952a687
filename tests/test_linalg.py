# tests/test_linalg.py

import numpy as np
import pytest

from polyvem.errors import InvalidArgumentError
from polyvem.kernel.linalg import diag_elems, identity_matrix, inverse_trace, matmul, trace


class TestMatmul:

    A = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    B = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])

    def test_plain(self):
        np.testing.assert_allclose(matmul(self.A, self.B), self.A @ self.B)

    def test_transposes_and_factor(self):
        np.testing.assert_allclose(matmul(self.A, self.A, transpose_a=True), self.A.T @ self.A)
        np.testing.assert_allclose(matmul(self.A, self.A, transpose_b=True, fac=0.5),
                                   0.5 * self.A @ self.A.T)
        np.testing.assert_allclose(matmul(self.B, self.A, transpose_a=True, transpose_b=True),
                                   self.B.T @ self.A.T)

    def test_incompatible_shapes_raise(self):
        with pytest.raises(InvalidArgumentError):
            matmul(self.A, self.A)

    def test_vectors_raise(self):
        with pytest.raises(InvalidArgumentError):
            matmul(np.ones(3), np.ones(3))


def test_trace_and_diagonal():
    m = np.arange(9.0).reshape(3, 3)
    assert trace(m) == pytest.approx(12.0)
    np.testing.assert_allclose(diag_elems(m), [0.0, 4.0, 8.0])
    with pytest.raises(InvalidArgumentError):
        trace(np.ones((2, 3)))


class TestInverseTrace:

    def test_diagonal(self):
        assert inverse_trace(np.diag([1.0, 2.0, 4.0])) == pytest.approx(1.75)

    def test_full_matrix(self):
        m = np.array([[4.0, 1.0, 0.5], [1.0, 3.0, 0.2], [0.5, 0.2, 2.0]])
        assert inverse_trace(m) == pytest.approx(np.trace(np.linalg.inv(m)))

    def test_singular_raises(self):
        with pytest.raises(InvalidArgumentError):
            inverse_trace(np.array([[1.0, 1.0], [1.0, 1.0]]))


def test_identity():
    np.testing.assert_allclose(identity_matrix(2.5, 3), 2.5 * np.eye(3))
