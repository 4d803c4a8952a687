# polyvem/elements.py
"""
CELL STIFFNESS MATRICES
=======================

PURPOSE:
--------
Build the local VEM stiffness matrix of one polygonal (2D) or polyhedral
(3D) cell from its corner coordinates and material constants.

THE FORMULA:
------------
    K = V * Wc D Wc^T  +  (I - P)^T S (I - P)

    V            cell area (2D) or volume (3D)
    Wc, D        constant-strain projection and elasticity matrix
    I - P        projector complement (basis.projector_complement)
    S            stability term (stability.stability_term)

The first term is the CONSISTENT part: exact for linear displacement
fields. The second term adds stiffness to the remaining, higher-order
modes so that only rigid-body motions have zero energy.

Rows and columns follow the cell's corners: dof dim * i + d is component d
of corner i. In 3D the corners are the sorted distinct point ids of the
faces (LocalStiffness.indexing).
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .basis import CellBasis, cell_basis_2d, cell_basis_3d
from .config import CONFIG
from .geometry import compute_cell_geometry, pick_points
from .kernel.dof import LocalIndexing
from .kernel.linalg import matmul
from .material import elasticity_matrix
from .model import StabilityChoice, as_points
from .stability import stability_term


@dataclass
class LocalStiffness:
    """
    Stiffness matrix of one polyhedral cell.

    matrix is (3M, 3M) for the M distinct corners of the cell, ordered as
    `indexing` (sorted global point ids); dof 3*i + d of the matrix is
    component d of point indexing[i].
    """
    matrix: np.ndarray
    indexing: np.ndarray
    centroid: np.ndarray
    volume: float


def final_assembly(
    wc: np.ndarray,
    d: np.ndarray,
    nc: np.ndarray,
    imp: np.ndarray,
    stability: StabilityChoice,
    volume: float,
) -> np.ndarray:
    """Consistent part plus stability part, K = V Wc D Wc^T + (I - P)^T S (I - P)."""
    dwct = matmul(d, wc, transpose_b=True)
    consistent = matmul(wc, dwct, fac=volume)

    s = stability_term(stability, nc, d, volume, consistent=consistent)
    stab = matmul(imp, matmul(s, imp), transpose_a=True)
    return consistent + stab


def _stiffness_from_basis(basis: CellBasis, young: float, poisson: float,
                          stability: StabilityChoice) -> np.ndarray:
    d = elasticity_matrix(young, poisson, basis.dim)
    return final_assembly(basis.wc, d, basis.nc, basis.projector_complement(),
                          stability, basis.volume)


def stiffness_matrix_2d(
    points,
    corner_ixs: Sequence[int],
    young: float,
    poisson: float,
    stability: Optional[StabilityChoice] = None,
) -> np.ndarray:
    """
    Stiffness matrix of a polygonal cell.

    Parameters:
    -----------
    points : array_like
        All mesh points, shape (num_points, 2) or flat
    corner_ixs : sequence of int
        The cell's corner indices, counter-clockwise
    young, poisson : float
        Material parameters of the cell
    stability : StabilityChoice, optional
        Defaults to CONFIG.default_stability

    Returns:
    --------
    np.ndarray
        Shape (2N, 2N), dof 2*i + d = component d of corner corner_ixs[i]
    """
    stability = CONFIG.default_stability if stability is None else StabilityChoice(stability)
    corners = pick_points(as_points(points, 2), corner_ixs)
    return _stiffness_from_basis(cell_basis_2d(corners), young, poisson, stability)


def stiffness_matrix_3d(
    points,
    faces: Sequence[Sequence[int]],
    young: float,
    poisson: float,
    stability: Optional[StabilityChoice] = None,
) -> LocalStiffness:
    """
    Stiffness matrix of a polyhedral cell.

    Parameters:
    -----------
    points : array_like
        All mesh points, shape (num_points, 3) or flat
    faces : sequence of sequences of int
        The cell's faces in GLOBAL point numbering, each counter-clockwise
        seen from outside the cell
    young, poisson : float
        Material parameters of the cell
    stability : StabilityChoice, optional
        Defaults to CONFIG.default_stability

    Returns:
    --------
    LocalStiffness
        The matrix together with the local-to-global point map, the cell
        centroid and volume (reused for body forces)

    Raises:
    -------
    InwardNormalsError, StarPointError
        From the cell geometry computation
    """
    stability = CONFIG.default_stability if stability is None else StabilityChoice(stability)
    local = LocalIndexing.from_faces(faces)
    corners = pick_points(as_points(points, 3), local.indexing)

    geom = compute_cell_geometry(corners, local.faces)
    basis = cell_basis_3d(corners, local.faces, geom.volume, geom.normals)
    matrix = _stiffness_from_basis(basis, young, poisson, stability)

    return LocalStiffness(
        matrix=matrix,
        indexing=local.indexing,
        centroid=geom.centroid,
        volume=geom.volume,
    )
