# polyvem/kernel/dof.py
"""
DOF MANAGER: Dimension-Agnostic Degree of Freedom Indexing
==========================================================

PURPOSE:
--------
This module handles the mapping from (point_index, component) to global DOF
indices, and the per-cell renumbering of global points into a compact local
numbering.

    2D elasticity:  2 DOF/point (ux, uy)
    3D elasticity:  3 DOF/point (ux, uy, uz)

    global dof = dim * point_index + component

USAGE:
------
    dof = DOFManager(dof_per_node=3)
    dof.idx(node_id=2, local_dof=1)   # -> 7

    # per-cell local numbering of the points a cell touches
    local = LocalIndexing.from_faces(cell_faces)
    local.indexing     # sorted global point ids, local id = position
    local.faces        # faces rewritten in local numbering
    dof.element_dof_map(local.indexing)
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..errors import InvalidArgumentError


@dataclass
class DOFManager:
    """
    Manages degree-of-freedom indexing.

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per point: 2 in 2D, 3 in 3D

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=2)
    >>> dof.idx(1, 0)
    2
    >>> dof.ndof(4)
    8
    >>> dof.element_dof_map([2, 5])
    [4, 5, 10, 11]
    """
    dof_per_node: int

    def idx(self, node_id: int, local_dof: int) -> int:
        """Global DOF index of component `local_dof` at point `node_id`."""
        return self.dof_per_node * node_id + local_dof

    def ndof(self, n_nodes: int) -> int:
        """Total DOFs for a system with n_nodes points."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """
        All global DOF indices of a single point.

        >>> DOFManager(dof_per_node=3).node_dofs(2)
        [6, 7, 8]
        """
        base = self.dof_per_node * node_id
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: Sequence[int]) -> List[int]:
        """
        Flattened global DOF indices of a cell's points, in the given order.

        Local DOF i of the cell maps to element_dof_map(...)[i], i.e. local
        point i // dof_per_node, component i % dof_per_node.
        """
        return (
            self.dof_per_node * np.repeat(np.asarray(node_ids, dtype=int), self.dof_per_node)
            + np.tile(np.arange(self.dof_per_node), len(node_ids))
        ).tolist()


@dataclass
class LocalIndexing:
    """
    Compact local numbering of the points referenced by one cell.

    Attributes:
    -----------
    indexing : np.ndarray
        Sorted unique global point ids; local id i <-> global id indexing[i]
    faces : List[np.ndarray]
        The cell's faces, rewritten in local numbering
    """
    indexing: np.ndarray
    faces: List[np.ndarray]

    @classmethod
    def from_faces(cls, faces: Sequence[Sequence[int]]) -> "LocalIndexing":
        """Build the local numbering from faces given in global numbering."""
        counts = [len(f) for f in faces]
        flat = np.concatenate([np.asarray(f, dtype=int) for f in faces])
        indexing, local_flat = np.unique(flat, return_inverse=True)
        local_faces = np.split(local_flat.ravel(), np.cumsum(counts)[:-1])
        return cls(indexing=indexing, faces=local_faces)

    @property
    def num_points(self) -> int:
        return int(self.indexing.size)

    def to_global(self, local_ids) -> np.ndarray:
        return self.indexing[np.asarray(local_ids, dtype=int)]


DOF_2D = DOFManager(dof_per_node=2)   # ux, uy
DOF_3D = DOFManager(dof_per_node=3)   # ux, uy, uz


def dof_manager(dim: int) -> DOFManager:
    """Pre-configured manager for a spatial dimension."""
    if dim == 2:
        return DOF_2D
    if dim == 3:
        return DOF_3D
    raise InvalidArgumentError(f"Only dimensions 2 and 3 are supported, got {dim}")
