# polyvem/post.py
"""
POST-PROCESSING: Cell Stresses and Potential-Gradient Forces
============================================================

PURPOSE:
--------
Work with a solved displacement field, or with cell-wise scalar fields:

- compute_stress_2d / compute_stress_3d
      constant stress (or strain) per cell, sigma = D Wc^T u_cell,
      optionally with the linear operator u -> sigma as triplets
- potential_gradient_force_3d
      nodal forces from a cell-wise constant potential such as pore
      pressure, optionally with the operator field -> forces

VOIGT ORDER:
------------
    2D:  (xx, yy, xy)
    3D:  (xx, yy, zz, xy, yz, xz)

Shear components are TENSOR components (sigma_xy, eps_xy), not
engineering strains.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .assembly import per_cell
from .basis import cell_basis_2d, q_3d, wc_3d
from .errors import InvalidArgumentError
from .geometry import compute_cell_geometry, pick_points
from .kernel.assemble import TripletBuilder, Triplets
from .kernel.dof import DOF_2D, DOF_3D, LocalIndexing
from .kernel.linalg import matmul
from .material import elasticity_matrix
from .model import PolygonMesh, PolyhedralMesh

logger = logging.getLogger(__name__)


@dataclass
class StressResult:
    """
    Per-cell stress (or strain) values.

    stress has shape (num_cells, lsdim) with components (xx, yy, xy) in 2D
    and (xx, yy, zz, xy, yz, xz) in 3D. matrix, when requested, is the
    linear operator from the global displacement vector to stress.ravel():
    row lsdim * cell + i, column global dof.
    """
    stress: np.ndarray
    matrix: Optional[Triplets] = None


def _check_displacement(displacement, ndof: int) -> np.ndarray:
    u = np.asarray(displacement, dtype=float).ravel()
    if u.size != ndof:
        raise InvalidArgumentError(
            f"Displacement has {u.size} entries, expected {ndof} (one per global dof)"
        )
    return u


def _cell_stress(wc, d, u_local, do_stress: bool) -> np.ndarray:
    """
    Operator (lsdim, dim*N) and value of one cell's stress.

    Without do_stress the operator is Wc^T and the result is the strain
    (tensor shear components). With do_stress it is D Wc^T, and the shear
    rows are halved to undo the doubling built into D.
    """
    if do_stress:
        op = matmul(d, wc, transpose_b=True)
        lsdim = op.shape[0]
        shear = slice(2, 3) if lsdim == 3 else slice(3, 6)
        op[shear] *= 0.5
    else:
        op = wc.T.copy()
    return op, op @ u_local


def compute_stress_2d(
    mesh: PolygonMesh,
    young,
    poisson,
    displacement,
    do_stress: bool = True,
    do_matrix: bool = False,
) -> StressResult:
    """
    Constant stress per polygonal cell: sigma = D Wc^T u (plane strain).

    Parameters:
    -----------
    mesh : PolygonMesh
    young, poisson : float or array_like
        Scalar or one per cell
    displacement : array_like
        Full displacement vector, length 2 * num_points
    do_stress : bool
        If False, return the strain Wc^T u instead
    do_matrix : bool
        Also return the stress operator as triplets
    """
    num_cells = mesh.num_cells
    young = per_cell(young, num_cells, "young")
    poisson = per_cell(poisson, num_cells, "poisson")
    u = _check_displacement(displacement, DOF_2D.ndof(mesh.num_points))

    stress = np.zeros((num_cells, 3), dtype=float)
    builder = TripletBuilder() if do_matrix else None

    for c, corner_ixs in enumerate(mesh.cells()):
        basis = cell_basis_2d(pick_points(mesh.points, corner_ixs))
        d = elasticity_matrix(young[c], poisson[c], 2)
        dof_map = DOF_2D.element_dof_map(corner_ixs)
        op, stress[c] = _cell_stress(basis.wc, d, u[dof_map], do_stress)
        if builder is not None:
            builder.add_block(np.arange(3 * c, 3 * c + 3), op, col_map=dof_map)

    return StressResult(stress, builder.build() if builder is not None else None)


def compute_stress_3d(
    mesh: PolyhedralMesh,
    young,
    poisson,
    displacement,
    do_stress: bool = True,
    do_matrix: bool = False,
) -> StressResult:
    """
    Constant stress per polyhedral cell: sigma = D Wc^T u.

    Parameters as for compute_stress_2d(); displacement has length
    3 * num_points.
    """
    num_cells = mesh.num_cells
    young = per_cell(young, num_cells, "young")
    poisson = per_cell(poisson, num_cells, "poisson")
    u = _check_displacement(displacement, DOF_3D.ndof(mesh.num_points))

    stress = np.zeros((num_cells, 6), dtype=float)
    builder = TripletBuilder() if do_matrix else None

    logger.info("Computing stress for %d cells", num_cells)
    for c, faces in enumerate(mesh.cells()):
        local = LocalIndexing.from_faces(faces)
        corners = pick_points(mesh.points, local.indexing)
        geom = compute_cell_geometry(corners, local.faces)
        wc = wc_3d(q_3d(corners, local.faces, geom.volume, geom.normals))

        d = elasticity_matrix(young[c], poisson[c], 3)
        dof_map = DOF_3D.element_dof_map(local.indexing)
        op, stress[c] = _cell_stress(wc, d, u[dof_map], do_stress)
        if builder is not None:
            builder.add_block(np.arange(6 * c, 6 * c + 6), op, col_map=dof_map)

    return StressResult(stress, builder.build() if builder is not None else None)


def potential_gradient_force_3d(
    mesh: PolyhedralMesh,
    field,
    get_matrix: bool = False,
) -> Tuple[np.ndarray, Optional[Triplets]]:
    """
    Nodal forces from the gradient of a cell-wise constant potential.

    For a scalar p per cell (e.g. pore pressure), the force on corner i of
    a cell is p * z_i, where z_i is the integral over the cell boundary of
    corner i's basis function times the outward normal. This equals the
    first three components of V * Wc^T applied to [p, p, p, 0, 0, 0], but
    needs no volume: q computed with unit volume is z_i / 2.

    Parameters:
    -----------
    mesh : PolyhedralMesh
    field : array_like
        One value per cell
    get_matrix : bool
        Also return the operator `div` with fgrad = div @ field, as
        triplets (3 * point + d, cell, value)

    Returns:
    --------
    (fgrad, div) : (np.ndarray, Triplets or None)
        fgrad has length 3 * num_points
    """
    field = np.asarray(field, dtype=float).ravel()
    if field.size != mesh.num_cells:
        raise InvalidArgumentError(
            f"field has {field.size} entries, expected one per cell ({mesh.num_cells})"
        )

    fgrad = np.zeros(DOF_3D.ndof(mesh.num_points), dtype=float)
    builder = TripletBuilder() if get_matrix else None

    for c, faces in enumerate(mesh.cells()):
        local = LocalIndexing.from_faces(faces)
        corners = pick_points(mesh.points, local.indexing)
        geom = compute_cell_geometry(corners, local.faces)

        qv = q_3d(corners, local.faces, 1.0, geom.normals)
        dof_map = DOF_3D.element_dof_map(local.indexing)
        np.add.at(fgrad, dof_map, 2.0 * field[c] * qv.ravel())
        if builder is not None:
            builder.add_block(dof_map, 2.0 * qv.reshape(-1, 1), col_map=[c])

    return fgrad, builder.build() if builder is not None else None
