# polyvem/kernel/assemble.py
"""
ASSEMBLY: Dimension-Agnostic Triplet Assembly
=============================================

PURPOSE:
--------
This module handles the scatter of cell contributions into a global sparse
system. The global matrix is kept as an unordered list of
(row, column, value) TRIPLETS, where repeated (row, column) pairs add up
(coordinate/COO format). That is exactly what an external sparse solver
wants, and it makes per-cell contributions independent: each cell just
appends its own block.

    for each cell:
        dof_map = dof.element_dof_map(cell_points)
        ke = local stiffness (len(dof_map) x len(dof_map))
        builder.add_block(dof_map, ke)          # appends len(dof_map)^2 triplets
        add_to_vector(rhs, dof_map, fe)         # scatter-add into the RHS

    system = LinearSystem(builder.build(), rhs)

The boundary-condition pass (kernel/boundary.py) then rewrites the system.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse

from ..errors import InvalidArgumentError


@dataclass
class Triplets:
    """
    A sparse matrix as parallel (row, column, value) arrays.

    Duplicated (row, column) pairs are summed when the matrix is formed.
    Iterating yields (row, col, value) tuples.
    """
    rows: np.ndarray
    cols: np.ndarray
    vals: np.ndarray

    def __post_init__(self):
        self.rows = np.asarray(self.rows, dtype=int).ravel()
        self.cols = np.asarray(self.cols, dtype=int).ravel()
        self.vals = np.asarray(self.vals, dtype=float).ravel()
        if not (self.rows.size == self.cols.size == self.vals.size):
            raise InvalidArgumentError(
                f"Triplet arrays differ in length: {self.rows.size}, "
                f"{self.cols.size}, {self.vals.size}"
            )

    @classmethod
    def empty(cls) -> "Triplets":
        return cls(np.empty(0, dtype=int), np.empty(0, dtype=int), np.empty(0, dtype=float))

    def __len__(self) -> int:
        return int(self.vals.size)

    def __iter__(self) -> Iterator[Tuple[int, int, float]]:
        for r, c, v in zip(self.rows.tolist(), self.cols.tolist(), self.vals.tolist()):
            yield r, c, v

    def shape_hint(self) -> Tuple[int, int]:
        """Smallest shape that holds every triplet."""
        if len(self) == 0:
            return 0, 0
        return int(self.rows.max()) + 1, int(self.cols.max()) + 1

    def to_sparse(self, shape: Optional[Tuple[int, int]] = None) -> scipy.sparse.csr_matrix:
        """Form the matrix (duplicates summed) as a scipy CSR matrix."""
        shape = self.shape_hint() if shape is None else shape
        return scipy.sparse.coo_matrix((self.vals, (self.rows, self.cols)), shape=shape).tocsr()

    def to_dense(self, shape: Optional[Tuple[int, int]] = None) -> np.ndarray:
        """Dense version of the matrix. Debug/test aid only."""
        n_rows, n_cols = self.shape_hint() if shape is None else shape
        return sparse_to_full(self, n_rows, n_cols)


@dataclass
class LinearSystem:
    """
    Global system A x = b with A in triplet form.

    Attributes:
    -----------
    matrix : Triplets
        System matrix entries, duplicates additive
    rhs : np.ndarray
        Dense right-hand side, indexed by global DOF
    """
    matrix: Triplets
    rhs: np.ndarray

    @property
    def num_dofs(self) -> int:
        return int(self.rhs.size)

    @property
    def triplets(self) -> List[Tuple[int, int, float]]:
        return list(self.matrix)

    def to_sparse(self) -> scipy.sparse.csr_matrix:
        return self.matrix.to_sparse((self.num_dofs, self.num_dofs))

    def to_dense(self) -> np.ndarray:
        return self.matrix.to_dense((self.num_dofs, self.num_dofs))


@dataclass
class TripletBuilder:
    """
    Collects per-cell blocks and concatenates them once at the end.

    Example:
    --------
    >>> builder = TripletBuilder()
    >>> builder.add_block([0, 1], np.eye(2))
    >>> len(builder.build())
    4
    """
    _rows: List[np.ndarray] = field(default_factory=list)
    _cols: List[np.ndarray] = field(default_factory=list)
    _vals: List[np.ndarray] = field(default_factory=list)

    def add_block(
        self,
        row_map: Sequence[int],
        block: np.ndarray,
        col_map: Optional[Sequence[int]] = None,
    ) -> None:
        """
        Append all entries of a dense block.

        Entry block[a, b] goes to (row_map[a], col_map[b]); col_map defaults
        to row_map (square cell matrices).
        """
        row_map = np.asarray(row_map, dtype=int)
        col_map = row_map if col_map is None else np.asarray(col_map, dtype=int)
        block = np.asarray(block, dtype=float)

        # Sanity check: block must match the maps
        if block.shape != (row_map.size, col_map.size):
            raise InvalidArgumentError(
                f"Block shape {block.shape} doesn't match dof maps "
                f"({row_map.size}, {col_map.size})"
            )

        self._rows.append(np.repeat(row_map, col_map.size))
        self._cols.append(np.tile(col_map, row_map.size))
        self._vals.append(block.ravel())

    def build(self) -> Triplets:
        if not self._vals:
            return Triplets.empty()
        return Triplets(
            np.concatenate(self._rows),
            np.concatenate(self._cols),
            np.concatenate(self._vals),
        )


def add_to_vector(target: np.ndarray, dof_map: Sequence[int], values: np.ndarray) -> None:
    """
    Scatter-add a local vector into a global vector (in-place).

    Repeated indices in dof_map accumulate.
    """
    values = np.asarray(values, dtype=float).ravel()
    dof_map = np.asarray(dof_map, dtype=int)
    if values.size != dof_map.size:
        raise InvalidArgumentError(
            f"Local vector length {values.size} doesn't match dof_map length {dof_map.size}"
        )
    np.add.at(target, dof_map, values)


def sparse_to_full(triplets, n_rows: int, n_cols: int) -> np.ndarray:
    """
    Dense row-major matrix from a triplet list, summing duplicates.

    Quadratic in size; meant for inspecting small systems in tests.

    Parameters:
    -----------
    triplets : Triplets or iterable of (row, col, value)
    n_rows, n_cols : int
        Shape of the result
    """
    result = np.zeros((n_rows, n_cols), dtype=float)
    for i, j, v in triplets:
        if not (0 <= i < n_rows and 0 <= j < n_cols):
            raise InvalidArgumentError(
                f"Triplet ({i}, {j}) outside matrix of shape ({n_rows}, {n_cols})"
            )
        result[i, j] += v
    return result


def format_matrix(matrix: np.ndarray, zero_threshold: float = 0.0) -> str:
    """
    Render a small matrix as text; entries with |a| <= zero_threshold print as 0.
    """
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    lines = []
    for row in matrix:
        cells = [
            f"{0:>12d}" if abs(v) <= zero_threshold else f"{v:>12.2e}"
            for v in row
        ]
        lines.append("".join(cells))
    return "\n".join(lines)
