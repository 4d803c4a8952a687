# polyvem/kernel/boundary.py
"""
BOUNDARY CONDITIONS: Dirichlet Handling on a Triplet System
===========================================================

PURPOSE:
--------
Apply prescribed displacements u[dof] = value to an assembled LinearSystem.
Two strategies are offered; both modify the system IN PLACE.

1. REDUCTION (reduce_system)
   Fixed dofs are removed from the unknowns:

       b_i -= A_ij * value_j          for every fixed column j
       drop every triplet in a fixed row or fixed column
       renumber the free dofs 0, 1, 2, ... in ascending order
       b = b[free]

   The result is smaller and stays symmetric. expand_reduced_solution()
   maps the solution back to the full numbering.

2. TRIVIAL EQUATIONS (set_boundary_conditions)
   The system keeps its size; each fixed dof gets the equation
   1 * u[dof] = value:

       b_i -= A_ij * value_j          for every fixed column j
       zero every triplet in a fixed row or fixed column
       exactly one diagonal triplet per fixed dof carries 1
       b[dof] = value

   Several cells usually contribute a diagonal triplet to the same dof.
   Only the first one is set to 1 (the others are zeroed) so that the
   SUMMED matrix has a unit diagonal entry there.

Fixed dof indices must be given in ascending order. A dof may be listed
more than once if every listing prescribes the same value; it is then
fixed once.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from ..errors import InvalidArgumentError
from .assemble import LinearSystem, Triplets

logger = logging.getLogger(__name__)


def _check_fixed_dofs(
    num_dofs: int,
    fixed_dofs: Sequence[int],
    fixed_values: Sequence[float],
) -> Tuple[np.ndarray, np.ndarray]:
    fixed = np.asarray(fixed_dofs, dtype=int).ravel()
    values = np.asarray(fixed_values, dtype=float).ravel()

    if fixed.size != values.size:
        raise InvalidArgumentError(
            f"Got {fixed.size} fixed dofs but {values.size} fixed values"
        )
    if fixed.size > 1 and np.any(np.diff(fixed) < 0):
        raise InvalidArgumentError(
            "The indices of fixed degrees of freedom must be provided in "
            "ascending order."
        )
    if fixed.size and (fixed[0] < 0 or fixed[-1] >= num_dofs):
        raise InvalidArgumentError(
            f"Fixed dof indices must lie in [0, {num_dofs}), "
            f"got range [{fixed[0]}, {fixed[-1]}]"
        )

    # a dof listed more than once is fixed once
    fixed, first = np.unique(fixed, return_index=True)
    if first.size < values.size:
        repeated = np.repeat(values[first], np.diff(np.append(first, values.size)))
        if not np.array_equal(repeated, values):
            raise InvalidArgumentError(
                "A fixed degree of freedom was given twice with different values"
            )
        values = values[first]
    return fixed, values


def _move_fixed_columns_to_rhs(system: LinearSystem, fixed: np.ndarray,
                               values: np.ndarray) -> np.ndarray:
    """Subtract A_ij * value_j from b_i for fixed columns j. Returns the fixed-dof mask."""
    is_fixed = np.zeros(system.num_dofs, dtype=bool)
    is_fixed[fixed] = True

    prescribed = np.zeros(system.num_dofs, dtype=float)
    prescribed[fixed] = values

    a = system.matrix
    in_fixed_col = is_fixed[a.cols]
    np.subtract.at(
        system.rhs,
        a.rows[in_fixed_col],
        a.vals[in_fixed_col] * prescribed[a.cols[in_fixed_col]],
    )
    return is_fixed


def reduce_system(
    system: LinearSystem,
    fixed_dofs: Sequence[int],
    fixed_values: Sequence[float],
) -> LinearSystem:
    """
    Eliminate fixed dofs from the system (in place).

    Parameters:
    -----------
    system : LinearSystem
        Assembled system; matrix and rhs are replaced by their reduced versions
    fixed_dofs : sequence of int
        Global dof indices, ascending (repeats allowed)
    fixed_values : sequence of float
        Prescribed value for each fixed dof

    Returns:
    --------
    LinearSystem
        The same (modified) system object, for chaining

    Raises:
    -------
    InvalidArgumentError
        If fixed_dofs are not ascending, out of range, repeated with
        different values, or their count differs from fixed_values
    """
    fixed, values = _check_fixed_dofs(system.num_dofs, fixed_dofs, fixed_values)

    logger.debug("Reducing system: moving %d fixed columns to right hand side", fixed.size)
    is_fixed = _move_fixed_columns_to_rhs(system, fixed, values)

    logger.debug("Reducing system: determining renumbering")
    free = np.flatnonzero(~is_fixed)
    renum = np.full(system.num_dofs, -1, dtype=int)
    renum[free] = np.arange(free.size)

    logger.debug("Reducing system: eliminating entries")
    a = system.matrix
    keep = ~(is_fixed[a.rows] | is_fixed[a.cols])
    system.matrix = Triplets(renum[a.rows[keep]], renum[a.cols[keep]], a.vals[keep])
    system.rhs = system.rhs[free].copy()

    logger.info("Reduced system to %d free dofs (%d fixed)", free.size, fixed.size)
    return system


def set_boundary_conditions(
    system: LinearSystem,
    fixed_dofs: Sequence[int],
    fixed_values: Sequence[float],
) -> LinearSystem:
    """
    Impose fixed dofs as trivial equations 1 * u[dof] = value (in place).

    The system keeps its size and symmetry. Parameters and errors as for
    reduce_system().
    """
    fixed, values = _check_fixed_dofs(system.num_dofs, fixed_dofs, fixed_values)

    logger.debug("Setting boundary conditions by trivial equations (%d dofs)", fixed.size)
    is_fixed = _move_fixed_columns_to_rhs(system, fixed, values)

    a = system.matrix
    rows, cols, vals = a.rows, a.cols, a.vals.copy()
    vals[is_fixed[rows] | is_fixed[cols]] = 0.0

    # one unit diagonal per fixed dof: the first existing diagonal triplet,
    # or an appended one when no cell touches that dof
    diag_positions = np.flatnonzero((rows == cols) & is_fixed[rows])
    dofs_with_diag, first = np.unique(rows[diag_positions], return_index=True)
    vals[diag_positions[first]] = 1.0

    missing = np.setdiff1d(fixed, dofs_with_diag, assume_unique=True)
    if missing.size:
        logger.debug("Appending diagonal entries for %d untouched fixed dofs", missing.size)
        rows = np.concatenate([rows, missing])
        cols = np.concatenate([cols, missing])
        vals = np.concatenate([vals, np.ones(missing.size)])

    system.matrix = Triplets(rows, cols, vals)
    system.rhs[fixed] = values

    logger.info("Set %d boundary conditions as trivial equations", fixed.size)
    return system


def expand_reduced_solution(
    x_reduced,
    num_dofs: int,
    fixed_dofs: Sequence[int],
    fixed_values: Sequence[float],
) -> np.ndarray:
    """
    Full-length solution vector from the solution of a reduced system.

    Free dofs receive x_reduced in ascending order; fixed dofs receive their
    prescribed values.

    Example:
    --------
    >>> expand_reduced_solution([5.0, 6.0], 3, [1], [0.5])
    array([5. , 0.5, 6. ])
    """
    fixed, values = _check_fixed_dofs(num_dofs, fixed_dofs, fixed_values)
    x_reduced = np.asarray(x_reduced, dtype=float).ravel()

    is_fixed = np.zeros(num_dofs, dtype=bool)
    is_fixed[fixed] = True
    if x_reduced.size != num_dofs - fixed.size:
        raise InvalidArgumentError(
            f"Reduced solution has {x_reduced.size} entries, expected {num_dofs - fixed.size}"
        )

    x = np.empty(num_dofs, dtype=float)
    x[~is_fixed] = x_reduced
    x[fixed] = values
    return x
