# tests/conftest.py
"""
Shared test cells.

Polygons are counter-clockwise; polyhedra are (points, faces) with face
corners counter-clockwise seen from outside.
"""

import numpy as np
import pytest

from polyvem.generative import HEX_FACES


@pytest.fixture
def unit_square():
    return np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


@pytest.fixture
def pentagon():
    """An irregular convex pentagon."""
    return np.array([[0.0, 0.0], [2.0, 0.2], [2.5, 1.5], [1.0, 2.4], [-0.3, 1.2]])


@pytest.fixture
def l_shape():
    """A non-convex L-shaped hexagon of area 3, centroid (5/6, 5/6)."""
    return np.array([[0.0, 0.0], [2.0, 0.0], [2.0, 1.0], [1.0, 1.0], [1.0, 2.0], [0.0, 2.0]])


@pytest.fixture
def unit_cube():
    points = np.array([
        [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
        [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
    ], dtype=float)
    faces = [list(f) for f in HEX_FACES]
    return points, faces


@pytest.fixture
def unit_tet():
    points = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=float)
    faces = [[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]]
    return points, faces


@pytest.fixture
def triangular_prism():
    points = np.array([
        [0, 0, 0], [1, 0, 0], [0, 1, 0],
        [0, 0, 1], [1, 0, 1], [0, 1, 1],
    ], dtype=float)
    faces = [[0, 2, 1], [3, 4, 5], [0, 1, 4, 3], [1, 2, 5, 4], [2, 0, 3, 5]]
    return points, faces


@pytest.fixture
def u_prism():
    """
    A U-shaped prism (extruded U polygon). The two inner walls of the slot
    face each other, so no point sees every face: not star-shaped.
    """
    base = np.array([
        [0, 0], [3, 0], [3, 2], [2, 2], [2, 1], [1, 1], [1, 2], [0, 2],
    ], dtype=float)
    points = np.vstack([
        np.column_stack([base, np.zeros(8)]),
        np.column_stack([base, np.ones(8)]),
    ])
    faces = [list(range(7, -1, -1)), list(range(8, 16))]
    for i in range(8):
        j = (i + 1) % 8
        faces.append([i, j, j + 8, i + 8])
    return points, faces


@pytest.fixture
def dented_cube():
    """
    A unit cube whose top face is pushed in by a pyramid with its apex at
    (0.5, 0.5, 0.1): volume 1 - 0.9 / 3 = 0.7. Non-convex but star-shaped;
    the star region is the thin slab below the apex, so the cell centroid
    (z ~ 0.382) does NOT qualify as a star point.
    """
    points = np.array([
        [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
        [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
        [0.5, 0.5, 0.1],
    ], dtype=float)
    faces = [list(f) for f in HEX_FACES if f != (4, 5, 6, 7)]
    faces += [[4, 5, 8], [5, 6, 8], [6, 7, 8], [7, 4, 8]]
    return points, faces
