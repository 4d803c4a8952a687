# loads.py - Equivalent nodal loads for body forces and boundary tractions
"""
Distribute distributed loads to cell corners such that the nodal forces
add up to the total load.

    body force, 2D:   corner c gets (tributary area of c) * b
    body force, 3D:   face corner c gets (volume of the two tetrahedra formed
                      by its tessellation triangles and the cell centroid) * b
    traction, 2D:     each endpoint of an edge gets (L / 2) * t
    traction, 3D:     face corner c gets (tributary area of c) * t

All functions return per-corner force arrays, shape (N, dim); scattering
into the global right-hand side happens in assembly.py.
"""

from typing import Sequence

import numpy as np

from .geometry import (
    corner_tributary_areas,
    norm,
    point_diff,
    tessellate_face,
    tetrahedron_volume,
)


def body_force_2d(corners, bforce) -> np.ndarray:
    """
    Nodal forces of a constant body force on a polygon.

    Parameters:
    -----------
    corners : array_like
        Cell corner coordinates, shape (N, 2)
    bforce : array_like
        Force per unit area, shape (2,)

    Returns:
    --------
    np.ndarray
        Shape (N, 2)
    """
    areas = corner_tributary_areas(np.asarray(corners, dtype=float))
    return np.outer(areas, np.asarray(bforce, dtype=float))


def body_force_3d(face_points: Sequence[np.ndarray], centroid, bforce) -> np.ndarray:
    """
    Nodal forces of a constant body force on a polyhedron, per face corner.

    A corner shared by k faces appears k times in the result; scattering
    the rows into the global vector sums them.

    Parameters:
    -----------
    face_points : sequence of np.ndarray
        Corner coordinates of each face of the cell, shape (n_f, 3) each
    centroid : array_like
        Cell centroid
    bforce : array_like
        Force per unit volume, shape (3,)

    Returns:
    --------
    np.ndarray
        Shape (sum of n_f, 3), rows in face-corner storage order
    """
    centroid = np.asarray(centroid, dtype=float)
    bforce = np.asarray(bforce, dtype=float)

    weights = []
    for pts in face_points:
        tris = tessellate_face(pts, skip_if_tri=False)
        vols = np.array([tetrahedron_volume(t[0], t[1], t[2], centroid) for t in tris])
        # triangles 2c and 2c-1 belong to corner c
        weights.append(vols[0::2] + np.roll(vols[1::2], 1))

    if not weights:
        return np.zeros((0, 3), dtype=float)
    return np.outer(np.concatenate(weights), bforce)


def applied_forces_2d(p1, p2, force) -> np.ndarray:
    """
    Nodal forces of a constant traction on the edge p1-p2.

    Returns shape (2, 2): row 0 for p1, row 1 for p2. Each end gets half
    the edge length times the traction.
    """
    half_length = 0.5 * norm(point_diff(p2, p1))
    return np.tile(half_length * np.asarray(force, dtype=float), (2, 1))


def applied_forces_3d(face_pts, force) -> np.ndarray:
    """Nodal forces of a constant traction on a face, shape (n, 3)."""
    areas = corner_tributary_areas(np.asarray(face_pts, dtype=float))
    return np.outer(areas, np.asarray(force, dtype=float))
