# polyvem/kernel/linalg.py
"""Small dense linear-algebra helpers used by the VEM matrix builders."""

import numpy as np

from ..errors import InvalidArgumentError


def matmul(
    a: np.ndarray,
    b: np.ndarray,
    transpose_a: bool = False,
    transpose_b: bool = False,
    fac: float = 1.0,
) -> np.ndarray:
    """
    Compute fac * op(a) @ op(b), where op() optionally transposes.

    Args:
        a, b: 2D matrices
        transpose_a, transpose_b: Use the transpose of a / b
        fac: Scalar factor applied to the product

    Returns:
        The product matrix

    Raises:
        InvalidArgumentError: If the inner dimensions do not agree
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.ndim != 2 or b.ndim != 2:
        raise InvalidArgumentError(
            f"matmul expects 2D matrices, got shapes {a.shape} and {b.shape}"
        )
    op_a = a.T if transpose_a else a
    op_b = b.T if transpose_b else b
    if op_a.shape[1] != op_b.shape[0]:
        raise InvalidArgumentError(
            f"Matrices are not compatible for multiplication: {op_a.shape} x {op_b.shape}"
        )
    result = op_a @ op_b
    if fac != 1.0:
        result *= fac
    return result


def trace(a: np.ndarray) -> float:
    a = np.asarray(a, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise InvalidArgumentError(f"trace expects a square matrix, got shape {a.shape}")
    return float(np.trace(a))


def diag_elems(a: np.ndarray) -> np.ndarray:
    return np.diag(np.asarray(a, dtype=float)).copy()


def inverse_trace(a: np.ndarray) -> float:
    """
    Trace of the inverse of a symmetric positive definite matrix.

    Computed from the eigenvalues, so no explicit inverse is formed.
    For a diagonal matrix this is the sum of reciprocal diagonal entries.
    """
    a = np.asarray(a, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise InvalidArgumentError(f"inverse_trace expects a square matrix, got shape {a.shape}")
    eigenvalues = np.linalg.eigvalsh(a)
    if np.any(eigenvalues <= 0.0):
        raise InvalidArgumentError(
            f"inverse_trace requires a positive definite matrix (min eigenvalue {eigenvalues.min():.3e})"
        )
    return float(np.sum(1.0 / eigenvalues))


def identity_matrix(fac: float, n: int) -> np.ndarray:
    """fac * I, with I the n x n identity."""
    return fac * np.eye(n, dtype=float)
