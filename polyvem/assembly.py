# polyvem/assembly.py
"""
GLOBAL ASSEMBLY: Mechanical System for 2D and 3D Meshes
=======================================================

PURPOSE:
--------
Build the global linear system A u = b of linear elasticity on a polygonal
or polyhedral mesh:

    1. for each cell: local VEM stiffness -> triplets, body force -> rhs
    2. Neumann tractions -> rhs
    3. Dirichlet conditions, either by REDUCTION (fixed dofs removed,
       free dofs renumbered) or by TRIVIAL EQUATIONS (system keeps its size)

The resulting LinearSystem holds the matrix as triplets; hand
`system.to_sparse()` and `system.rhs` to a sparse solver. When the system
was reduced, kernel.boundary.expand_reduced_solution() maps the solution
back to one displacement per global dof.

DOF NUMBERING:
--------------
    dof = dim * point + component,     num_points = max corner index + 1

USAGE:
------
    mesh = rectangle_mesh(4, 4, 1.0, 1.0)
    system = assemble_mech_system_2d(
        mesh, young=1e9, poisson=0.25,
        fixed_dofs=[0, 1, 2 * 5], fixed_values=[0.0, 0.0, 0.0],
        neumann_faces=[(4, 9)], neumann_forces=[(1e6, 0.0)],
    )
    u_free = scipy.sparse.linalg.spsolve(system.to_sparse(), system.rhs)
"""

import logging
from typing import Callable, Optional, Sequence

import numpy as np

from .config import CONFIG
from .errors import InvalidArgumentError
from .geometry import pick_points
from .elements import stiffness_matrix_2d, stiffness_matrix_3d
from .kernel.assemble import LinearSystem, TripletBuilder, add_to_vector
from .kernel.boundary import reduce_system, set_boundary_conditions
from .kernel.dof import DOF_2D, DOF_3D
from .loads import applied_forces_2d, applied_forces_3d, body_force_2d, body_force_3d
from .model import PolygonMesh, PolyhedralMesh, StabilityChoice

logger = logging.getLogger(__name__)

# progress(stage, done, total)
ProgressCallback = Callable[[str, int, int], None]


def per_cell(value, num_cells: int, name: str) -> np.ndarray:
    """Broadcast a scalar material parameter to one value per cell."""
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return np.full(num_cells, float(arr))
    arr = arr.ravel()
    if arr.size != num_cells:
        raise InvalidArgumentError(f"{name} has {arr.size} entries, expected one per cell ({num_cells})")
    return arr


def per_cell_vectors(value, num_cells: int, dim: int, name: str) -> np.ndarray:
    """
    Normalize a per-cell vector field to shape (num_cells, dim).

    Accepts None (zero), a single vector of length dim (applied to every
    cell), an array of shape (num_cells, dim) or its flat version.
    """
    if value is None:
        return np.zeros((num_cells, dim), dtype=float)
    arr = np.asarray(value, dtype=float)
    if arr.shape == (dim,) and num_cells != 1:
        return np.tile(arr, (num_cells, 1))
    if arr.size != num_cells * dim:
        raise InvalidArgumentError(
            f"{name} has {arr.size} entries, expected {dim} per cell ({num_cells} cells)"
        )
    return arr.reshape(num_cells, dim)


def _neumann_forces(forces, count: int, dim: int) -> np.ndarray:
    if count == 0:
        return np.zeros((0, dim), dtype=float)
    arr = np.asarray(forces, dtype=float)
    if arr.size != count * dim:
        raise InvalidArgumentError(
            f"neumann_forces has {arr.size} entries, expected {dim} per Neumann face ({count})"
        )
    return arr.reshape(count, dim)


def _apply_dirichlet(system: LinearSystem, fixed_dofs, fixed_values,
                     reduce_boundary: Optional[bool]) -> None:
    reduce_boundary = CONFIG.reduce_boundary if reduce_boundary is None else reduce_boundary
    if reduce_boundary:
        logger.info("Reducing system")
        reduce_system(system, fixed_dofs, fixed_values)
    else:
        logger.info("Setting boundary conditions without reducing system")
        set_boundary_conditions(system, fixed_dofs, fixed_values)


def assemble_mech_system_2d(
    mesh: PolygonMesh,
    young,
    poisson,
    body_force=None,
    fixed_dofs: Sequence[int] = (),
    fixed_values: Sequence[float] = (),
    neumann_faces=None,
    neumann_forces=None,
    stability: Optional[StabilityChoice] = None,
    reduce_boundary: Optional[bool] = None,
    progress: Optional[ProgressCallback] = None,
) -> LinearSystem:
    """
    Assemble the elasticity system of a polygonal mesh.

    Parameters:
    -----------
    mesh : PolygonMesh
        Cells with counter-clockwise corners
    young, poisson : float or array_like
        Material parameters, scalar or one per cell
    body_force : array_like, optional
        Force per unit area: one 2-vector for all cells, or (num_cells, 2)
    fixed_dofs : sequence of int
        Dirichlet dofs (2 * point + component), ascending
    fixed_values : sequence of float
        Prescribed displacement per fixed dof
    neumann_faces : array_like of int, optional
        Boundary edges as point pairs, shape (num_edges, 2)
    neumann_forces : array_like, optional
        Traction (force per unit length) per edge, shape (num_edges, 2)
    stability : StabilityChoice, optional
        Defaults to CONFIG.default_stability
    reduce_boundary : bool, optional
        Reduction (True) or trivial equations (False); defaults to
        CONFIG.reduce_boundary
    progress : callable, optional
        Called as progress(stage, done, total) after each cell

    Returns:
    --------
    LinearSystem
        Of size 2 * num_points, minus the fixed dofs if reduced
    """
    points = mesh.points
    num_cells = mesh.num_cells
    young = per_cell(young, num_cells, "young")
    poisson = per_cell(poisson, num_cells, "poisson")
    bforce = per_cell_vectors(body_force, num_cells, 2, "body_force")

    ndof = DOF_2D.ndof(mesh.num_points)
    builder = TripletBuilder()
    rhs = np.zeros(ndof, dtype=float)

    logger.info("Assembling 2D system: %d cells, %d dofs", num_cells, ndof)
    for c, corner_ixs in enumerate(mesh.cells()):
        ke = stiffness_matrix_2d(points, corner_ixs, young[c], poisson[c], stability)
        dof_map = DOF_2D.element_dof_map(corner_ixs)
        builder.add_block(dof_map, ke)

        fe = body_force_2d(pick_points(points, corner_ixs), bforce[c])
        add_to_vector(rhs, dof_map, fe)

        if progress is not None:
            progress("cells", c + 1, num_cells)

    edges = np.zeros((0, 2), dtype=int) if neumann_faces is None \
        else np.asarray(neumann_faces, dtype=int).reshape(-1, 2)
    forces = _neumann_forces(neumann_forces, len(edges), 2)
    logger.debug("Applying tractions on %d edges", len(edges))
    for (n1, n2), force in zip(edges, forces):
        fe = applied_forces_2d(points[n1], points[n2], force)
        add_to_vector(rhs, DOF_2D.element_dof_map([n1, n2]), fe)

    system = LinearSystem(builder.build(), rhs)
    _apply_dirichlet(system, fixed_dofs, fixed_values, reduce_boundary)
    return system


def assemble_mech_system_3d(
    mesh: PolyhedralMesh,
    young,
    poisson,
    body_force=None,
    fixed_dofs: Sequence[int] = (),
    fixed_values: Sequence[float] = (),
    neumann_faces=None,
    neumann_forces=None,
    stability: Optional[StabilityChoice] = None,
    reduce_boundary: Optional[bool] = None,
    progress: Optional[ProgressCallback] = None,
) -> LinearSystem:
    """
    Assemble the elasticity system of a polyhedral mesh.

    Same as assemble_mech_system_2d() with 3-vectors, except that
    neumann_faces holds GLOBAL FACE indices of the mesh (storage order) and
    neumann_forces is force per unit area, shape (num_neumann_faces, 3).

    Raises:
    -------
    InwardNormalsError, StarPointError
        If a cell's geometry cannot be processed
    InvalidArgumentError
        For malformed parameters or Dirichlet indices
    """
    points = mesh.points
    num_cells = mesh.num_cells
    young = per_cell(young, num_cells, "young")
    poisson = per_cell(poisson, num_cells, "poisson")
    bforce = per_cell_vectors(body_force, num_cells, 3, "body_force")

    ndof = DOF_3D.ndof(mesh.num_points)
    builder = TripletBuilder()
    rhs = np.zeros(ndof, dtype=float)

    logger.info("Assembling 3D system: %d cells, %d dofs", num_cells, ndof)
    for c, faces in enumerate(mesh.cells()):
        local = stiffness_matrix_3d(points, faces, young[c], poisson[c], stability)
        builder.add_block(DOF_3D.element_dof_map(local.indexing), local.matrix)

        if np.any(bforce[c]):
            fe = body_force_3d([points[f] for f in faces], local.centroid, bforce[c])
            add_to_vector(rhs, DOF_3D.element_dof_map(np.concatenate(faces)), fe)

        if progress is not None:
            progress("cells", c + 1, num_cells)

    face_ixs = np.zeros(0, dtype=int) if neumann_faces is None \
        else np.asarray(neumann_faces, dtype=int).ravel()
    forces = _neumann_forces(neumann_forces, face_ixs.size, 3)
    logger.info("Applying forces on %d faces", face_ixs.size)
    for f, force in zip(face_ixs, forces):
        if not 0 <= f < mesh.num_faces:
            raise InvalidArgumentError(f"Neumann face {f} outside [0, {mesh.num_faces})")
        corners = mesh.face(f)
        add_to_vector(rhs, DOF_3D.element_dof_map(corners), applied_forces_3d(points[corners], force))

    system = LinearSystem(builder.build(), rhs)
    _apply_dirichlet(system, fixed_dofs, fixed_values, reduce_boundary)
    logger.info("Finished assembly: %d unknowns, %d triplets", system.num_dofs, len(system.matrix))
    return system
