# tests/test_boundary.py
"""
DIRICHLET HANDLING ON TRIPLET SYSTEMS
=====================================

Small hand-made systems where the reduced / trivial-equation results can
be written down directly.
"""

import numpy as np
import pytest

from polyvem.errors import InvalidArgumentError
from polyvem.kernel import (
    LinearSystem,
    Triplets,
    TripletBuilder,
    expand_reduced_solution,
    format_matrix,
    reduce_system,
    set_boundary_conditions,
    sparse_to_full,
)

# 3x3 SPD matrix assembled from two overlapping 2x2 blocks
K1 = np.array([[2.0, -1.0], [-1.0, 2.0]])
K2 = np.array([[3.0, -1.0], [-1.0, 1.0]])


def make_system():
    builder = TripletBuilder()
    builder.add_block([0, 1], K1)
    builder.add_block([1, 2], K2)
    return LinearSystem(builder.build(), np.array([1.0, 2.0, 3.0]))


def dense_reference():
    return np.array([
        [2.0, -1.0, 0.0],
        [-1.0, 5.0, -1.0],
        [0.0, -1.0, 1.0],
    ])


class TestTriplets:

    def test_duplicates_are_summed(self):
        system = make_system()
        assert len(system.matrix) == 8
        np.testing.assert_allclose(system.to_dense(), dense_reference())
        np.testing.assert_allclose(system.to_sparse().toarray(), dense_reference())

    def test_iteration_yields_tuples(self):
        t = Triplets([0, 1], [1, 0], [2.0, 3.0])
        assert list(t) == [(0, 1, 2.0), (1, 0, 3.0)]

    def test_mismatched_lengths_raise(self):
        with pytest.raises(InvalidArgumentError):
            Triplets([0, 1], [0], [1.0, 2.0])

    def test_block_shape_checked(self):
        with pytest.raises(InvalidArgumentError):
            TripletBuilder().add_block([0, 1, 2], K1)

    def test_rectangular_block(self):
        builder = TripletBuilder()
        builder.add_block([4, 5], np.array([[1.0], [2.0]]), col_map=[1])
        np.testing.assert_allclose(builder.build().to_dense((6, 2))[:, 1], [0, 0, 0, 0, 1.0, 2.0])


class TestReduceSystem:

    def test_reduction(self):
        """
        Fix u1 = 0.5. Row/column 1 disappear, b_i -= A_i1 * 0.5, and
        dofs 0, 2 become 0, 1.
        """
        system = make_system()
        reduce_system(system, [1], [0.5])

        np.testing.assert_allclose(system.to_dense(), [[2.0, 0.0], [0.0, 1.0]])
        np.testing.assert_allclose(system.rhs, [1.0 + 0.5, 3.0 + 0.5])
        assert system.num_dofs == 2

    def test_solution_matches_dense_partitioning(self):
        system = make_system()
        a, b = dense_reference(), system.rhs.copy()
        fixed, values = [0, 2], [0.1, -0.2]

        reduce_system(system, fixed, values)
        x = expand_reduced_solution(np.linalg.solve(system.to_dense(), system.rhs), 3, fixed, values)

        assert x[0] == pytest.approx(0.1)
        assert x[2] == pytest.approx(-0.2)
        # the free equation is satisfied by the full solution
        assert a[1] @ x == pytest.approx(b[1])

    def test_no_fixed_dofs(self):
        system = make_system()
        reduce_system(system, [], [])
        np.testing.assert_allclose(system.to_dense(), dense_reference())


class TestTrivialEquations:

    def test_unit_diagonal_despite_duplicates(self):
        """
        Dof 1 gets diagonal triplets from both blocks. After the pass the
        SUMMED diagonal must be exactly 1, row and column otherwise zero.
        """
        system = make_system()
        set_boundary_conditions(system, [1], [0.5])

        expected = np.array([
            [2.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
        ])
        np.testing.assert_allclose(system.to_dense(), expected)
        np.testing.assert_allclose(system.rhs, [1.5, 0.5, 3.5])

    def test_untouched_dof_gets_a_diagonal(self):
        system = make_system()
        system.rhs = np.append(system.rhs, 0.0)      # dof 3 appears in no triplet
        set_boundary_conditions(system, [3], [2.0])

        dense = system.to_dense()
        assert dense[3, 3] == 1.0
        assert system.rhs[3] == 2.0

    def test_same_solution_as_reduction(self):
        fixed, values = [0, 2], [0.1, -0.2]

        reduced = reduce_system(make_system(), fixed, values)
        x_red = expand_reduced_solution(np.linalg.solve(reduced.to_dense(), reduced.rhs), 3, fixed, values)

        full = set_boundary_conditions(make_system(), fixed, values)
        x_full = np.linalg.solve(full.to_dense(), full.rhs)

        np.testing.assert_allclose(x_full, x_red)


class TestFixedDofValidation:

    @pytest.mark.parametrize("strategy", [reduce_system, set_boundary_conditions])
    def test_unsorted_raises(self, strategy):
        with pytest.raises(InvalidArgumentError, match="ascending"):
            strategy(make_system(), [2, 0], [0.0, 0.0])

    @pytest.mark.parametrize("strategy", [reduce_system, set_boundary_conditions])
    def test_repeated_dof_is_fixed_once(self, strategy):
        """
        Listing dof 1 twice (same value) must give exactly the system of
        listing it once: its column is moved to the rhs only once.
        """
        twice = strategy(make_system(), [1, 1], [0.5, 0.5])
        once = strategy(make_system(), [1], [0.5])

        np.testing.assert_allclose(twice.to_dense(), once.to_dense())
        np.testing.assert_allclose(twice.rhs, once.rhs)

    @pytest.mark.parametrize("strategy", [reduce_system, set_boundary_conditions])
    def test_repeated_dof_with_conflicting_values_raises(self, strategy):
        with pytest.raises(InvalidArgumentError, match="different values"):
            strategy(make_system(), [0, 1, 1], [0.0, 0.5, 0.7])

    def test_expand_with_repeated_dof(self):
        np.testing.assert_allclose(
            expand_reduced_solution([5.0, 6.0], 3, [1, 1], [0.5, 0.5]), [5.0, 0.5, 6.0]
        )

    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidArgumentError):
            reduce_system(make_system(), [0, 1], [0.0])

    def test_out_of_range_raises(self):
        with pytest.raises(InvalidArgumentError):
            set_boundary_conditions(make_system(), [3], [0.0])


def test_expand_reduced_solution():
    np.testing.assert_allclose(expand_reduced_solution([5.0, 6.0], 3, [1], [0.5]), [5.0, 0.5, 6.0])
    with pytest.raises(InvalidArgumentError):
        expand_reduced_solution([5.0], 3, [1], [0.5])


class TestDebugHelpers:

    def test_sparse_to_full_rectangular(self):
        full = sparse_to_full([(0, 2, 1.0), (1, 0, 2.0), (1, 0, 0.5)], 2, 3)
        np.testing.assert_allclose(full, [[0.0, 0.0, 1.0], [2.5, 0.0, 0.0]])

    def test_sparse_to_full_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            sparse_to_full([(2, 0, 1.0)], 2, 3)

    def test_format_matrix_threshold(self):
        text = format_matrix(np.array([[1e-20, 2.0], [3.0, -4.0]]), zero_threshold=1e-12)
        lines = text.splitlines()
        assert len(lines) == 2
        assert lines[0].split()[0] == "0"
        assert "2.00e+00" in lines[0]
        assert "-4.00e+00" in lines[1]
