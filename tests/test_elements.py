# tests/test_elements.py
"""
CELL STIFFNESS MATRICES
=======================

WHAT IS TESTED?
===============
For every stability recipe, on convex and non-convex cells:

1. SYMMETRY:  K = K^T (reciprocity)
2. PSD:       no negative eigenvalues (energy is never negative)
3. KERNEL:    rigid-body motions produce no forces (K Nr = 0), and they
              are the ONLY zero-energy modes: 3 in 2D, 6 in 3D
"""

import numpy as np
import pytest

from polyvem.basis import nr_2d, nr_3d
from polyvem.elements import LocalStiffness, stiffness_matrix_2d, stiffness_matrix_3d
from polyvem.model import StabilityChoice

YOUNG = 1.0e3
POISSON = 0.3

ALL_STABILITIES = [StabilityChoice.SIMPLE, StabilityChoice.HARMONIC, StabilityChoice.D_RECIPE]


def null_space_dimension(k: np.ndarray, rel_tol: float = 1e-9) -> int:
    eig = np.linalg.eigvalsh(0.5 * (k + k.T))
    return int(np.sum(np.abs(eig) < rel_tol * np.abs(eig).max()))


@pytest.mark.parametrize("stability", ALL_STABILITIES)
@pytest.mark.parametrize("polygon", ['unit_square', 'pentagon', 'l_shape'])
class TestPolygonStiffness:

    def _stiffness(self, request, polygon, stability):
        corners = request.getfixturevalue(polygon)
        k = stiffness_matrix_2d(corners, range(len(corners)), YOUNG, POISSON, stability)
        return corners, k

    def test_symmetric(self, request, polygon, stability):
        _, k = self._stiffness(request, polygon, stability)
        np.testing.assert_allclose(k, k.T, atol=1e-10 * np.abs(k).max())

    def test_positive_semi_definite(self, request, polygon, stability):
        _, k = self._stiffness(request, polygon, stability)
        eig = np.linalg.eigvalsh(0.5 * (k + k.T))
        assert eig.min() > -1e-9 * eig.max()

    def test_rigid_body_kernel(self, request, polygon, stability):
        corners, k = self._stiffness(request, polygon, stability)
        np.testing.assert_allclose(k @ nr_2d(corners), 0.0, atol=1e-9 * np.abs(k).max())
        assert null_space_dimension(k) == 3


def test_corner_selection_from_global_points(unit_square):
    """Corners are picked from the global point array by index."""
    points = np.vstack([[[9.0, 9.0]], unit_square])
    k_direct = stiffness_matrix_2d(unit_square, [0, 1, 2, 3], YOUNG, POISSON)
    k_picked = stiffness_matrix_2d(points, [1, 2, 3, 4], YOUNG, POISSON)
    np.testing.assert_allclose(k_picked, k_direct)


def test_triangle_has_no_stability_contribution():
    """For a triangle, P is the identity: K is the consistency term for any recipe."""
    tri = np.array([[0.0, 0.0], [1.0, 0.0], [0.2, 0.9]])
    ks = [stiffness_matrix_2d(tri, [0, 1, 2], YOUNG, POISSON, s) for s in ALL_STABILITIES]
    np.testing.assert_allclose(ks[1], ks[0], rtol=1e-10, atol=1e-10)
    np.testing.assert_allclose(ks[2], ks[0], rtol=1e-10, atol=1e-10)


def test_stiffness_scales_with_young(pentagon):
    k1 = stiffness_matrix_2d(pentagon, range(5), 1.0, POISSON, StabilityChoice.SIMPLE)
    k2 = stiffness_matrix_2d(pentagon, range(5), 7.0, POISSON, StabilityChoice.SIMPLE)
    np.testing.assert_allclose(k2, 7.0 * k1)


@pytest.mark.parametrize("stability", ALL_STABILITIES)
@pytest.mark.parametrize("cell", ['unit_cube', 'unit_tet', 'triangular_prism', 'dented_cube'])
def test_polyhedron_stiffness(request, cell, stability):
    points, faces = request.getfixturevalue(cell)
    local = stiffness_matrix_3d(points, faces, YOUNG, POISSON, stability)
    k = local.matrix

    assert isinstance(local, LocalStiffness)
    assert k.shape == (3 * len(points), 3 * len(points))
    np.testing.assert_allclose(k, k.T, atol=1e-10 * np.abs(k).max())

    eig = np.linalg.eigvalsh(0.5 * (k + k.T))
    assert eig.min() > -1e-9 * eig.max()

    corners = points[local.indexing]
    np.testing.assert_allclose(k @ nr_3d(corners), 0.0, atol=1e-9 * np.abs(k).max())
    assert null_space_dimension(k) == 6


def test_polyhedron_local_indexing(unit_cube):
    """
    Faces referring to scattered global point ids: the matrix is ordered by
    the sorted global ids, and carries volume and centroid along.
    """
    points, faces = unit_cube
    global_ids = np.array([3, 8, 11, 20, 21, 25, 30, 31])
    all_points = np.zeros((32, 3))
    all_points[global_ids] = points
    global_faces = [global_ids[f].tolist() for f in faces]

    local = stiffness_matrix_3d(all_points, global_faces, YOUNG, POISSON)
    reference = stiffness_matrix_3d(points, faces, YOUNG, POISSON)

    np.testing.assert_array_equal(local.indexing, global_ids)
    np.testing.assert_allclose(local.matrix, reference.matrix)
    assert local.volume == pytest.approx(1.0)
    np.testing.assert_allclose(local.centroid, [0.5, 0.5, 0.5], atol=1e-12)


def test_harmonic_differs_from_simple_on_cube(unit_cube):
    points, faces = unit_cube
    k_simple = stiffness_matrix_3d(points, faces, YOUNG, POISSON, StabilityChoice.SIMPLE).matrix
    k_harm = stiffness_matrix_3d(points, faces, YOUNG, POISSON, StabilityChoice.HARMONIC).matrix
    assert not np.allclose(k_simple, k_harm)
