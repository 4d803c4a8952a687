# polyvem/basis.py
"""
VEM BASIS MATRICES
==================

PURPOSE:
--------
Builds the intermediary matrices of the first-order Virtual Element Method
for elasticity (Gain, Talischi & Paulino 2014, DOI:10.1016/j.cma.2014.05.005):

    Nr   rigid-body modes evaluated at the corners        (dim*N, lsdim)
    Nc   constant-strain modes evaluated at the corners   (dim*N, lsdim)
    Wr   projection weights onto rigid-body modes         (dim*N, lsdim)
    Wc   projection weights onto constant-strain modes    (dim*N, lsdim)
    q    per-corner boundary integral of the hat function
         times the outward normal, scaled by 1/(2 |E|)    (N, dim)

with lsdim = 3 in 2D and 6 in 3D (size of the linear-strain space).

BLOCK STRUCTURE:
----------------
All four matrices are stacks of one block per corner with a fixed zero
pattern, filled from a handful of per-corner entries:

    2D:  [e1  0  e2]          3D:  [e1  0  0  e2  0  e3]
         [ 0 e3  e4]               [ 0 e4  0  e5 e6  0 ]
                                   [ 0  0 e7  0  e8 e9 ]

Strain components are ordered (xx, yy, xy) in 2D and
(xx, yy, zz, xy, yz, xz) in 3D.

PROJECTOR:
----------
    P = Nr Wr^T + Nc Wc^T       projects corner displacements onto linear fields
    I - P                       what the stability term acts on

For exact q, Wr^T Nr = I, Wc^T Nc = I and the cross products vanish, so
I - P is idempotent.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .geometry import face_integral, point_average
from .kernel.linalg import identity_matrix, matmul


def corner_block_2d(e1, e2, e3, e4) -> np.ndarray:
    """
    Per-corner 2x3 blocks [[e1, 0, e2], [0, e3, e4]].

    The entries may be scalars or arrays of length N; the result has shape
    (N, 2, 3) (N = 1 for scalars).
    """
    e1, e2, e3, e4 = np.broadcast_arrays(*(np.atleast_1d(np.asarray(e, dtype=float))
                                           for e in (e1, e2, e3, e4)))
    zero = np.zeros_like(e1)
    return np.stack([
        np.stack([e1, zero, e2], axis=-1),
        np.stack([zero, e3, e4], axis=-1),
    ], axis=1)


def corner_block_3d(e1, e2, e3, e4, e5, e6, e7, e8, e9) -> np.ndarray:
    """
    Per-corner 3x6 blocks

        [[e1,  0,  0, e2,  0, e3],
         [ 0, e4,  0, e5, e6,  0],
         [ 0,  0, e7,  0, e8, e9]]

    Entries may be scalars or arrays of length N; result shape (N, 3, 6).
    """
    e1, e2, e3, e4, e5, e6, e7, e8, e9 = np.broadcast_arrays(
        *(np.atleast_1d(np.asarray(e, dtype=float))
          for e in (e1, e2, e3, e4, e5, e6, e7, e8, e9))
    )
    zero = np.zeros_like(e1)
    return np.stack([
        np.stack([e1, zero, zero, e2, zero, e3], axis=-1),
        np.stack([zero, e4, zero, e5, e6, zero], axis=-1),
        np.stack([zero, zero, e7, zero, e8, e9], axis=-1),
    ], axis=1)


def _stack_blocks(blocks: np.ndarray) -> np.ndarray:
    """(N, dim, lsdim) blocks -> (dim*N, lsdim) matrix, corner-major rows."""
    n, dim, lsdim = blocks.shape
    return blocks.reshape(n * dim, lsdim)


# =============================================================================
# q: boundary integrals of the corner basis functions
# =============================================================================

def q_2d(corners) -> np.ndarray:
    """
    q values of a polygon with counter-clockwise corners.

    Each edge contributes its scaled outward normal (dy, -dx) times
    1/(4 |E|) to both of its endpoints, i.e. half the edge integral of the
    hat function, times 1/(2 |E|).

    Returns:
    --------
    np.ndarray, shape (N, 2)
    """
    corners = np.asarray(corners, dtype=float)
    area = face_integral(corners)
    fac = 1.0 / (4.0 * area)

    nxt = np.roll(corners, -1, axis=0)
    scaled_normals = np.column_stack([nxt[:, 1] - corners[:, 1],
                                      -(nxt[:, 0] - corners[:, 0])])

    q = fac * scaled_normals                          # edge i -> corner i
    q += fac * np.roll(scaled_normals, 1, axis=0)     # edge i -> corner i+1
    return q


def q_3d(corners, faces: Sequence[Sequence[int]], volume: float,
         normals: np.ndarray) -> np.ndarray:
    """
    q values of a polyhedron.

    Parameters:
    -----------
    corners : array_like
        Cell corner coordinates, shape (N, 3)
    faces : sequence of sequences of int
        Faces in local corner numbering
    volume : float
        Cell volume (pass 1.0 to get the unscaled face integrals / 2)
    normals : np.ndarray
        Outward unit normal per face, shape (num_faces, 3)

    Returns:
    --------
    np.ndarray, shape (N, 3)
    """
    corners = np.asarray(corners, dtype=float)
    fac = 1.0 / (2.0 * volume)

    q = np.zeros_like(corners)
    for face, normal in zip(faces, normals):
        face = np.asarray(face, dtype=int)
        face_pts = corners[face]
        cvals = np.zeros(face.size, dtype=float)
        for e in range(face.size):
            cvals[:] = 0.0
            cvals[e] = 1.0      # integrate the hat function of corner e
            phi = face_integral(face_pts, cvals)
            q[face[e]] += fac * phi * np.asarray(normal)
    return q


# =============================================================================
# Nr, Nc: modes at the corners
# =============================================================================

def _offsets_from_mean(corners) -> np.ndarray:
    corners = np.asarray(corners, dtype=float)
    return corners - point_average(corners)


def nr_2d(corners) -> np.ndarray:
    d = _offsets_from_mean(corners)
    dx, dy = d[:, 0], d[:, 1]
    return _stack_blocks(corner_block_2d(1.0, dy, 1.0, -dx))


def nr_3d(corners) -> np.ndarray:
    d = _offsets_from_mean(corners)
    dx, dy, dz = d[:, 0], d[:, 1], d[:, 2]
    return _stack_blocks(corner_block_3d(1.0, dy, -dz, 1.0, -dx, dz, 1.0, -dy, dx))


def nc_2d(corners) -> np.ndarray:
    d = _offsets_from_mean(corners)
    dx, dy = d[:, 0], d[:, 1]
    return _stack_blocks(corner_block_2d(dx, dy, dy, dx))


def nc_3d(corners) -> np.ndarray:
    d = _offsets_from_mean(corners)
    dx, dy, dz = d[:, 0], d[:, 1], d[:, 2]
    return _stack_blocks(corner_block_3d(dx, dy, dz, dy, dx, dz, dz, dy, dx))


# =============================================================================
# Wr, Wc: projection weights from q
# =============================================================================

def wr_2d(q) -> np.ndarray:
    q = np.asarray(q, dtype=float)
    ncinv = 1.0 / q.shape[0]
    return _stack_blocks(corner_block_2d(ncinv, q[:, 1], ncinv, -q[:, 0]))


def wr_3d(q) -> np.ndarray:
    q = np.asarray(q, dtype=float)
    ncinv = 1.0 / q.shape[0]
    qx, qy, qz = q[:, 0], q[:, 1], q[:, 2]
    return _stack_blocks(corner_block_3d(ncinv, qy, -qz, ncinv, -qx, qz, ncinv, -qy, qx))


def wc_2d(q) -> np.ndarray:
    q = np.asarray(q, dtype=float)
    qx, qy = q[:, 0], q[:, 1]
    return _stack_blocks(corner_block_2d(2.0 * qx, qy, 2.0 * qy, qx))


def wc_3d(q) -> np.ndarray:
    q = np.asarray(q, dtype=float)
    qx, qy, qz = q[:, 0], q[:, 1], q[:, 2]
    return _stack_blocks(corner_block_3d(2.0 * qx, qy, qz, 2.0 * qy, qx, qz, 2.0 * qz, qy, qx))


def projector_complement(nr: np.ndarray, nc: np.ndarray,
                         wr: np.ndarray, wc: np.ndarray) -> np.ndarray:
    """I - P with P = Nr Wr^T + Nc Wc^T."""
    n = nr.shape[0]
    return identity_matrix(1.0, n) - matmul(nr, wr, transpose_b=True) - matmul(nc, wc, transpose_b=True)


# =============================================================================
# Per-cell bundle
# =============================================================================

@dataclass
class CellBasis:
    """All VEM basis matrices of one cell."""
    q: np.ndarray
    nr: np.ndarray
    nc: np.ndarray
    wr: np.ndarray
    wc: np.ndarray
    volume: float

    @property
    def dim(self) -> int:
        return self.q.shape[1]

    @property
    def num_corners(self) -> int:
        return self.q.shape[0]

    def projector_complement(self) -> np.ndarray:
        return projector_complement(self.nr, self.nc, self.wr, self.wc)


def cell_basis_2d(corners) -> CellBasis:
    """Basis matrices of a polygon with counter-clockwise corners, shape (N, 2)."""
    corners = np.asarray(corners, dtype=float)
    q = q_2d(corners)
    return CellBasis(
        q=q,
        nr=nr_2d(corners),
        nc=nc_2d(corners),
        wr=wr_2d(q),
        wc=wc_2d(q),
        volume=face_integral(corners),
    )


def cell_basis_3d(corners, faces: Sequence[Sequence[int]], volume: float,
                  normals: np.ndarray) -> CellBasis:
    """
    Basis matrices of a polyhedron.

    The volume and outward unit normals come from compute_cell_geometry();
    faces are in local corner numbering.
    """
    corners = np.asarray(corners, dtype=float)
    q = q_3d(corners, faces, volume, normals)
    return CellBasis(
        q=q,
        nr=nr_3d(corners),
        nc=nc_3d(corners),
        wr=wr_3d(q),
        wc=wc_3d(q),
        volume=volume,
    )
