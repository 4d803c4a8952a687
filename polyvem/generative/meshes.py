# polyvem/generative/meshes.py
"""
STRUCTURED MESH GENERATORS
==========================

PURPOSE:
--------
Generate simple meshes in the flat-array layout the assembly expects, for
demos, tests and quick studies:

- rectangle_mesh:  nx x ny quadrilaterals over [0, lx] x [0, ly], optionally
                   with jittered interior points (irregular quads)
- box_mesh:        nx x ny x nz hexahedra over [0, lx] x [0, ly] x [0, lz]

plus helpers to find boundary points, edges and faces by coordinate.

NUMBERING:
----------
    2D point (i, j)     -> j * (nx + 1) + i
    3D point (i, j, k)  -> k * (nx + 1) * (ny + 1) + j * (nx + 1) + i

Quads are counter-clockwise. Hexahedron faces are counter-clockwise seen
from outside, in the order (bottom, top, front y=0, back y=1, left x=0,
right x=1) of the unit cell:

        3 -------- 2          bottom  [0, 3, 2, 1]
        |          |          top     [4, 5, 6, 7]
        |  z = 0   |          front   [0, 1, 5, 4]
        |          |          back    [3, 7, 6, 2]
        0 -------- 1          left    [0, 4, 7, 3]
                              right   [1, 2, 6, 5]
    (4..7 are 0..3 lifted to z = 1)
"""

from typing import List, Optional

import numpy as np

from ..errors import InvalidArgumentError
from ..model import PolygonMesh, PolyhedralMesh

HEX_FACES = (
    (0, 3, 2, 1),
    (4, 5, 6, 7),
    (0, 1, 5, 4),
    (3, 7, 6, 2),
    (0, 4, 7, 3),
    (1, 2, 6, 5),
)


def _check_divisions(*counts: int) -> None:
    if any(n < 1 for n in counts):
        raise InvalidArgumentError(f"Mesh divisions must be >= 1, got {counts}")


def rectangle_mesh(
    nx: int,
    ny: int,
    lx: float = 1.0,
    ly: float = 1.0,
    jitter: float = 0.0,
    seed: Optional[int] = None,
) -> PolygonMesh:
    """
    Quadrilateral mesh of a rectangle.

    Parameters:
    -----------
    nx, ny : int
        Number of cells in x and y
    lx, ly : float
        Rectangle size
    jitter : float
        Random displacement of interior points, as a fraction of the cell
        size; must be below 0.25 so the quads stay convex
    seed : int, optional
        Seed for the jitter

    Returns:
    --------
    PolygonMesh
    """
    _check_divisions(nx, ny)
    if not 0.0 <= jitter < 0.25:
        raise InvalidArgumentError(f"jitter must lie in [0, 0.25), got {jitter}")

    x = np.linspace(0.0, lx, nx + 1)
    y = np.linspace(0.0, ly, ny + 1)
    xx, yy = np.meshgrid(x, y)                      # row j, column i
    points = np.column_stack([xx.ravel(), yy.ravel()])

    if jitter > 0.0:
        rng = np.random.default_rng(seed)
        interior = (
            (points[:, 0] > 0) & (points[:, 0] < lx)
            & (points[:, 1] > 0) & (points[:, 1] < ly)
        )
        hx, hy = lx / nx, ly / ny
        offsets = rng.uniform(-jitter, jitter, size=(int(interior.sum()), 2)) * [hx, hy]
        points[interior] += offsets

    def pid(i, j):
        return j * (nx + 1) + i

    cells = [
        [pid(i, j), pid(i + 1, j), pid(i + 1, j + 1), pid(i, j + 1)]
        for j in range(ny) for i in range(nx)
    ]
    return PolygonMesh.from_cells(points, cells)


def box_mesh(
    nx: int,
    ny: int,
    nz: int,
    lx: float = 1.0,
    ly: float = 1.0,
    lz: float = 1.0,
) -> PolyhedralMesh:
    """Hexahedral mesh of a box, faces oriented outward."""
    _check_divisions(nx, ny, nz)

    x = np.linspace(0.0, lx, nx + 1)
    y = np.linspace(0.0, ly, ny + 1)
    z = np.linspace(0.0, lz, nz + 1)
    zz, yy, xx = np.meshgrid(z, y, x, indexing='ij')
    points = np.column_stack([xx.ravel(), yy.ravel(), zz.ravel()])

    def pid(i, j, k):
        return (k * (ny + 1) + j) * (nx + 1) + i

    cells = []
    for k in range(nz):
        for j in range(ny):
            for i in range(nx):
                v = [
                    pid(i, j, k), pid(i + 1, j, k), pid(i + 1, j + 1, k), pid(i, j + 1, k),
                    pid(i, j, k + 1), pid(i + 1, j, k + 1), pid(i + 1, j + 1, k + 1), pid(i, j + 1, k + 1),
                ]
                cells.append([[v[a] for a in face] for face in HEX_FACES])
    return PolyhedralMesh.from_cells(points, cells)


# =============================================================================
# BOUNDARY QUERIES
# =============================================================================

def points_on_plane(points: np.ndarray, axis: int, value: float, tol: float = 1e-10) -> np.ndarray:
    """Sorted indices of points with points[:, axis] == value (within tol)."""
    return np.flatnonzero(np.abs(np.asarray(points)[:, axis] - value) <= tol)


def boundary_edges_2d(mesh: PolygonMesh, axis: int, value: float, tol: float = 1e-10) -> np.ndarray:
    """
    Cell edges lying on the line coordinate[axis] == value.

    Returns point pairs, shape (num_edges, 2), ordered as in the cells
    (counter-clockwise around their cell).
    """
    on_line = np.abs(mesh.points[:, axis] - value) <= tol
    edges: List[List[int]] = []
    for corners in mesh.cells():
        for a, b in zip(corners, np.roll(corners, -1)):
            if on_line[a] and on_line[b]:
                edges.append([int(a), int(b)])
    return np.asarray(edges, dtype=int).reshape(-1, 2)


def boundary_faces_3d(mesh: PolyhedralMesh, axis: int, value: float, tol: float = 1e-10) -> np.ndarray:
    """Global indices of faces lying in the plane coordinate[axis] == value."""
    on_plane = np.abs(mesh.points[:, axis] - value) <= tol
    return np.array(
        [f for f in range(mesh.num_faces) if np.all(on_plane[mesh.face(f)])],
        dtype=int,
    )
