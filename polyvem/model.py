# polyvem/model.py
"""
MODEL DEFINITIONS: Meshes, Cell Geometry and Stability Options
==============================================================

PURPOSE:
--------
This module defines the data structures the VEM core works on:

- PolygonMesh:      2D cells as counter-clockwise corner lists
- PolyhedralMesh:   3D cells as lists of faces, each face a corner list
- CellGeometry:     the result of processing one polyhedral cell
- StabilityChoice:  which stability term to add to the local stiffness

The meshes keep the flat-array layout a mesh library hands over
(counts + flattened indices), and only add slicing helpers on top.
No topology is built: a face shared by two cells is simply stored twice.

DATA LAYOUT:
------------
2D:
    points            (num_points, 2)
    num_cell_corners  [4, 4, 3, ...]              one entry per cell
    cell_corners      [0, 1, 5, 4, 1, 2, 6, ...]  flattened corner indices

3D:
    points            (num_points, 3)
    num_cell_faces    [6, 6, ...]                 one entry per cell
    num_face_corners  [4, 4, 4, 4, 4, 4, ...]     one entry per (cell) face
    face_corners      [...]                       flattened corner indices

Face corners must be ordered counter-clockwise when seen from OUTSIDE the
cell, so that all face normals point outward.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterator, List, Sequence

import numpy as np

from .errors import InvalidArgumentError


class StabilityChoice(Enum):
    """
    Stability term used to complete the VEM stiffness matrix.

    SIMPLE:    scalar multiple of identity, Gain et al. (2014)
    HARMONIC:  scalar multiple of identity, Andersen et al. (2017)
    D_RECIPE:  diagonal built from the consistent stiffness
    """
    SIMPLE = "simple"
    HARMONIC = "harmonic"
    D_RECIPE = "d_recipe"


def as_points(points, dim: int) -> np.ndarray:
    """
    Return points as a (num_points, dim) float array.

    Accepts either a flat sequence [x0, y0, (z0,) x1, y1, ...] or an
    array that already has shape (num_points, dim).
    """
    arr = np.asarray(points, dtype=float)
    if arr.ndim == 1:
        if arr.size % dim != 0:
            raise InvalidArgumentError(
                f"Flat point array of length {arr.size} is not a multiple of dim={dim}"
            )
        return arr.reshape(-1, dim)
    if arr.ndim != 2 or arr.shape[1] != dim:
        raise InvalidArgumentError(f"Expected points of shape (n, {dim}), got {arr.shape}")
    return arr


def _offsets(counts: np.ndarray) -> np.ndarray:
    return np.concatenate(([0], np.cumsum(counts))).astype(int)


@dataclass(frozen=True, eq=False)
class PolygonMesh:
    """
    A 2D mesh of polygonal cells.

    Parameters:
    -----------
    points : array_like
        Point coordinates, shape (num_points, 2) or flat (2 * num_points,)
    num_cell_corners : array_like of int
        Number of corners of each cell
    cell_corners : array_like of int
        Corner indices of all cells, concatenated. Each cell's corners
        must be listed counter-clockwise.

    Examples:
    ---------
    >>> mesh = PolygonMesh.from_cells([[0, 0], [1, 0], [1, 1], [0, 1]], [[0, 1, 2, 3]])
    >>> mesh.num_cells
    1
    >>> list(mesh.cell(0))
    [0, 1, 2, 3]
    """
    points: np.ndarray
    num_cell_corners: np.ndarray
    cell_corners: np.ndarray

    dim: ClassVar[int] = 2

    def __post_init__(self):
        object.__setattr__(self, 'points', as_points(self.points, 2))
        object.__setattr__(self, 'num_cell_corners',
                           np.asarray(self.num_cell_corners, dtype=int).ravel())
        object.__setattr__(self, 'cell_corners',
                           np.asarray(self.cell_corners, dtype=int).ravel())

        if self.num_cell_corners.sum() != self.cell_corners.size:
            raise InvalidArgumentError(
                f"num_cell_corners sums to {self.num_cell_corners.sum()}, "
                f"but {self.cell_corners.size} cell corners were given"
            )
        if np.any(self.num_cell_corners < 3):
            raise InvalidArgumentError("Every cell needs at least 3 corners")
        object.__setattr__(self, '_offsets', _offsets(self.num_cell_corners))

    @classmethod
    def from_cells(cls, points, cells: Sequence[Sequence[int]]) -> "PolygonMesh":
        """Build a mesh from a list of per-cell corner lists."""
        counts = [len(c) for c in cells]
        flat = [i for c in cells for i in c]
        return cls(points, counts, flat)

    @property
    def num_cells(self) -> int:
        return int(self.num_cell_corners.size)

    @property
    def num_points(self) -> int:
        """Number of points addressed by the dof numbering (max corner index + 1)."""
        if self.cell_corners.size == 0:
            return 0
        return int(self.cell_corners.max()) + 1

    def cell(self, c: int) -> np.ndarray:
        return self.cell_corners[self._offsets[c]:self._offsets[c + 1]]

    def cells(self) -> Iterator[np.ndarray]:
        for c in range(self.num_cells):
            yield self.cell(c)


@dataclass(frozen=True, eq=False)
class PolyhedralMesh:
    """
    A 3D mesh of polyhedral cells.

    Faces are numbered globally in storage order: faces 0..num_cell_faces[0]-1
    belong to cell 0, the next num_cell_faces[1] faces to cell 1, and so on.
    Neumann boundary faces are referenced by this global face number.

    Parameters:
    -----------
    points : array_like
        Point coordinates, shape (num_points, 3) or flat (3 * num_points,)
    num_cell_faces : array_like of int
        Number of faces of each cell
    num_face_corners : array_like of int
        Number of corners of each face (over all cells)
    face_corners : array_like of int
        Corner indices of all faces, concatenated
    """
    points: np.ndarray
    num_cell_faces: np.ndarray
    num_face_corners: np.ndarray
    face_corners: np.ndarray

    dim: ClassVar[int] = 3

    def __post_init__(self):
        object.__setattr__(self, 'points', as_points(self.points, 3))
        for name in ('num_cell_faces', 'num_face_corners', 'face_corners'):
            object.__setattr__(self, name, np.asarray(getattr(self, name), dtype=int).ravel())

        if self.num_cell_faces.sum() != self.num_face_corners.size:
            raise InvalidArgumentError(
                f"num_cell_faces sums to {self.num_cell_faces.sum()}, "
                f"but {self.num_face_corners.size} faces were given"
            )
        if self.num_face_corners.sum() != self.face_corners.size:
            raise InvalidArgumentError(
                f"num_face_corners sums to {self.num_face_corners.sum()}, "
                f"but {self.face_corners.size} face corners were given"
            )
        if np.any(self.num_face_corners < 3):
            raise InvalidArgumentError("Every face needs at least 3 corners")
        object.__setattr__(self, '_corner_offsets', _offsets(self.num_face_corners))
        object.__setattr__(self, '_face_offsets', _offsets(self.num_cell_faces))

    @classmethod
    def from_cells(cls, points, cells: Sequence[Sequence[Sequence[int]]]) -> "PolyhedralMesh":
        """Build a mesh from a list of cells, each a list of face corner lists."""
        num_cell_faces = [len(cell) for cell in cells]
        num_face_corners = [len(face) for cell in cells for face in cell]
        flat = [i for cell in cells for face in cell for i in face]
        return cls(points, num_cell_faces, num_face_corners, flat)

    @property
    def num_cells(self) -> int:
        return int(self.num_cell_faces.size)

    @property
    def num_faces(self) -> int:
        return int(self.num_face_corners.size)

    @property
    def num_points(self) -> int:
        """Number of points addressed by the dof numbering (max corner index + 1)."""
        if self.face_corners.size == 0:
            return 0
        return int(self.face_corners.max()) + 1

    def face(self, f: int) -> np.ndarray:
        return self.face_corners[self._corner_offsets[f]:self._corner_offsets[f + 1]]

    def cell_faces(self, c: int) -> List[np.ndarray]:
        return [self.face(f) for f in range(self._face_offsets[c], self._face_offsets[c + 1])]

    def cells(self) -> Iterator[List[np.ndarray]]:
        for c in range(self.num_cells):
            yield self.cell_faces(c)


@dataclass
class CellGeometry:
    """
    Geometry of one polyhedral cell.

    Attributes:
    -----------
    normals : np.ndarray
        Outward unit normal per face, shape (num_faces, 3)
    face_centroids : np.ndarray
        Centroid per face, shape (num_faces, 3)
    centroid : np.ndarray
        Cell centroid, shape (3,)
    star_point : np.ndarray
        A point from which every face is visible, shape (3,)
    volume : float
        Cell volume
    """
    normals: np.ndarray
    face_centroids: np.ndarray
    centroid: np.ndarray
    star_point: np.ndarray
    volume: float
