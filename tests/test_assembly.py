# tests/test_assembly.py
"""
GLOBAL ASSEMBLY: PATCH TESTS AND LOAD BOOKKEEPING
=================================================

WHAT IS A PATCH TEST?
=====================
A bar under uniform tension has a LINEAR displacement field. A first-order
VEM discretization reproduces linear fields exactly on any mesh, so the
computed nodal displacements must match the closed-form solution to
round-off, even on distorted meshes.

2D (plane strain), traction t in x on the right edge, ux = 0 on the left
edge, uy = 0 at the origin:

    eps_xx = t (1 - nu^2) / E,    eps_yy = -nu (1 + nu) t / E

3D, traction t in x on x = L, rollers on x = 0, y = 0, z = 0:

    eps_xx = t / E,               eps_yy = eps_zz = -nu t / E
"""

import numpy as np
import pytest
import scipy.sparse.linalg

from polyvem.assembly import assemble_mech_system_2d, assemble_mech_system_3d
from polyvem.errors import InvalidArgumentError
from polyvem.generative import (
    boundary_edges_2d,
    boundary_faces_3d,
    box_mesh,
    points_on_plane,
    rectangle_mesh,
)
from polyvem.kernel import expand_reduced_solution
from polyvem.model import PolygonMesh, StabilityChoice

YOUNG = 2.0e4
POISSON = 0.3
TRACTION = 10.0


def solve(system):
    return scipy.sparse.linalg.spsolve(system.to_sparse().tocsc(), system.rhs)


# =============================================================================
# 2D
# =============================================================================

def patch_setup_2d(mesh, lx):
    left = points_on_plane(mesh.points, 0, 0.0)
    origin = int(points_on_plane(mesh.points[left], 1, 0.0)[0])
    fixed = np.unique(np.concatenate([2 * left, [2 * left[origin] + 1]]))
    values = np.zeros(fixed.size)

    edges = boundary_edges_2d(mesh, 0, lx)
    forces = np.tile([TRACTION, 0.0], (len(edges), 1))
    return fixed, values, edges, forces


def exact_2d(points):
    exx = TRACTION * (1 - POISSON ** 2) / YOUNG
    eyy = -POISSON * (1 + POISSON) * TRACTION / YOUNG
    return np.column_stack([exx * points[:, 0], eyy * points[:, 1]]).ravel()


@pytest.mark.parametrize("stability", list(StabilityChoice))
@pytest.mark.parametrize("jitter", [0.0, 0.2])
def test_patch_test_2d(stability, jitter):
    lx, ly = 2.0, 1.0
    mesh = rectangle_mesh(4, 3, lx, ly, jitter=jitter, seed=42)
    fixed, values, edges, forces = patch_setup_2d(mesh, lx)

    system = assemble_mech_system_2d(
        mesh, YOUNG, POISSON,
        fixed_dofs=fixed, fixed_values=values,
        neumann_faces=edges, neumann_forces=forces,
        stability=stability,
    )
    u = expand_reduced_solution(solve(system), 2 * mesh.num_points, fixed, values)

    np.testing.assert_allclose(u, exact_2d(mesh.points), atol=1e-10,
                               err_msg="Linear displacement field not reproduced")


def test_reduction_and_trivial_equations_agree_2d():
    """
    WHAT IS THIS TEST?
    ==================
    Both Dirichlet strategies must produce the same displacement field,
    here with a NON-zero prescribed displacement and a body force.
    """
    mesh = rectangle_mesh(3, 3, 1.0, 1.0, jitter=0.15, seed=7)
    left = points_on_plane(mesh.points, 0, 0.0)
    fixed = np.sort(np.concatenate([2 * left, 2 * left + 1]))
    values = np.where(fixed % 2 == 1, 0.01, 0.0)
    kwargs = dict(body_force=[0.0, -5.0], fixed_dofs=fixed, fixed_values=values)

    reduced = assemble_mech_system_2d(mesh, YOUNG, POISSON, reduce_boundary=True, **kwargs)
    u_red = expand_reduced_solution(solve(reduced), 2 * mesh.num_points, fixed, values)

    full = assemble_mech_system_2d(mesh, YOUNG, POISSON, reduce_boundary=False, **kwargs)
    assert full.num_dofs == 2 * mesh.num_points
    u_full = solve(full)

    np.testing.assert_allclose(u_full, u_red, rtol=1e-9, atol=1e-12)
    np.testing.assert_allclose(u_full[fixed], values)


class TestLoads2D:

    def test_body_force_total(self):
        mesh = rectangle_mesh(3, 2, 3.0, 2.0, jitter=0.1, seed=1)
        system = assemble_mech_system_2d(mesh, YOUNG, POISSON, body_force=[1.5, -2.0])
        np.testing.assert_allclose(system.rhs[0::2].sum(), 1.5 * 6.0)
        np.testing.assert_allclose(system.rhs[1::2].sum(), -2.0 * 6.0)

    def test_per_cell_body_force(self):
        mesh = rectangle_mesh(2, 1)
        system = assemble_mech_system_2d(mesh, YOUNG, POISSON, body_force=[[1.0, 0.0], [0.0, 1.0]])
        np.testing.assert_allclose(system.rhs[0::2].sum(), 0.5)
        np.testing.assert_allclose(system.rhs[1::2].sum(), 0.5)

    def test_traction_split_between_edge_ends(self):
        mesh = rectangle_mesh(1, 1, 1.0, 2.0)
        system = assemble_mech_system_2d(mesh, YOUNG, POISSON,
                                         neumann_faces=[(1, 3)], neumann_forces=[(4.0, 1.0)])
        # edge length 2: each end gets 1 * (4, 1)
        np.testing.assert_allclose(system.rhs[2:4], [4.0, 1.0])
        np.testing.assert_allclose(system.rhs[6:8], [4.0, 1.0])
        np.testing.assert_allclose(system.rhs[[0, 1, 4, 5]], 0.0)

    def test_trailing_unused_points_get_no_dofs(self, unit_square):
        points = np.vstack([unit_square, [[5.0, 5.0]]])
        mesh = PolygonMesh.from_cells(points, [[0, 1, 2, 3]])
        system = assemble_mech_system_2d(mesh, YOUNG, POISSON)
        assert system.num_dofs == 8

    def test_matrix_is_symmetric(self):
        mesh = rectangle_mesh(2, 2, jitter=0.2, seed=3)
        a = assemble_mech_system_2d(mesh, YOUNG, POISSON).to_dense()
        np.testing.assert_allclose(a, a.T, atol=1e-9)


class TestParameterValidation:

    def test_per_cell_material(self):
        mesh = rectangle_mesh(2, 1)
        system = assemble_mech_system_2d(mesh, [YOUNG, 2 * YOUNG], [0.2, 0.3])
        assert system.num_dofs == 12

    def test_wrong_number_of_moduli(self):
        mesh = rectangle_mesh(2, 1)
        with pytest.raises(InvalidArgumentError):
            assemble_mech_system_2d(mesh, [YOUNG, YOUNG, YOUNG], POISSON)

    def test_wrong_number_of_neumann_forces(self):
        mesh = rectangle_mesh(1, 1)
        with pytest.raises(InvalidArgumentError):
            assemble_mech_system_2d(mesh, YOUNG, POISSON,
                                    neumann_faces=[(1, 3)], neumann_forces=[1.0, 2.0, 3.0])

    def test_unsorted_dirichlet(self):
        mesh = rectangle_mesh(1, 1)
        with pytest.raises(InvalidArgumentError):
            assemble_mech_system_2d(mesh, YOUNG, POISSON, fixed_dofs=[3, 1], fixed_values=[0.0, 0.0])


# =============================================================================
# 3D
# =============================================================================

def roller_dofs(mesh):
    fixed = np.concatenate([
        3 * points_on_plane(mesh.points, axis, 0.0) + axis for axis in range(3)
    ])
    fixed = np.unique(fixed)
    return fixed, np.zeros(fixed.size)


@pytest.mark.parametrize("stability", list(StabilityChoice))
@pytest.mark.parametrize("reduce_boundary", [True, False])
def test_patch_test_3d(stability, reduce_boundary):
    lx, ly, lz = 2.0, 1.0, 1.0
    mesh = box_mesh(2, 2, 2, lx, ly, lz)
    fixed, values = roller_dofs(mesh)
    faces = boundary_faces_3d(mesh, 0, lx)
    assert faces.size == 4

    system = assemble_mech_system_3d(
        mesh, YOUNG, POISSON,
        fixed_dofs=fixed, fixed_values=values,
        neumann_faces=faces, neumann_forces=np.tile([TRACTION, 0.0, 0.0], (faces.size, 1)),
        stability=stability, reduce_boundary=reduce_boundary,
    )
    u = solve(system)
    if reduce_boundary:
        u = expand_reduced_solution(u, 3 * mesh.num_points, fixed, values)

    exx = TRACTION / YOUNG
    eyy = -POISSON * TRACTION / YOUNG
    expected = (mesh.points * [exx, eyy, eyy]).ravel()
    np.testing.assert_allclose(u, expected, atol=1e-10,
                               err_msg="Uniaxial tension field not reproduced")


class TestLoads3D:

    def test_body_force_total(self):
        mesh = box_mesh(2, 1, 1, 2.0, 1.0, 0.5)
        system = assemble_mech_system_3d(mesh, YOUNG, POISSON, body_force=[0.0, 0.0, -9.81])
        np.testing.assert_allclose(system.rhs[2::3].sum(), -9.81 * 1.0)
        np.testing.assert_allclose(system.rhs[0::3], 0.0, atol=1e-14)

    def test_body_force_on_cube_corners(self):
        """A unit cube spreads its weight evenly: 1/8 per corner."""
        mesh = box_mesh(1, 1, 1)
        system = assemble_mech_system_3d(mesh, YOUNG, POISSON, body_force=[0.0, 0.0, -8.0])
        np.testing.assert_allclose(system.rhs[2::3], np.full(8, -1.0))

    def test_traction_total(self):
        mesh = box_mesh(1, 2, 2, 1.0, 2.0, 3.0)
        faces = boundary_faces_3d(mesh, 0, 1.0)
        system = assemble_mech_system_3d(mesh, YOUNG, POISSON, neumann_faces=faces,
                                         neumann_forces=np.tile([0.0, 2.0, 0.0], (faces.size, 1)))
        np.testing.assert_allclose(system.rhs[1::3].sum(), 2.0 * 6.0)

    def test_bad_neumann_face(self):
        mesh = box_mesh(1, 1, 1)
        with pytest.raises(InvalidArgumentError):
            assemble_mech_system_3d(mesh, YOUNG, POISSON, neumann_faces=[6],
                                    neumann_forces=[[1.0, 0.0, 0.0]])

    def test_progress_callback(self):
        mesh = box_mesh(2, 1, 1)
        calls = []
        assemble_mech_system_3d(mesh, YOUNG, POISSON,
                                progress=lambda stage, done, total: calls.append((stage, done, total)))
        assert calls == [("cells", 1, 2), ("cells", 2, 2)]

    def test_shared_faces_assemble_symmetric(self):
        mesh = box_mesh(2, 1, 1)
        a = assemble_mech_system_3d(mesh, YOUNG, POISSON).to_dense()
        np.testing.assert_allclose(a, a.T, atol=1e-8)
        assert a.shape == (36, 36)
