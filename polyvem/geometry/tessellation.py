# polyvem/geometry/tessellation.py
"""
FACE TESSELLATION AND FACE INTEGRALS
====================================

PURPOSE:
--------
A face with N corners (planar or slightly warped, in 2D or 3D) is split
into 2N triangles fanned from the face centroid:

            corner c+1
               /|
              / |  <- triangle 2c+1: (centroid, mid_c, corner_c+1)
   centroid  +--+ mid_c
              \\ |  <- triangle 2c:   (centroid, corner_c, mid_c)
               \\|
            corner c

The ordering matters downstream: triangle 2c belongs to corner c and
triangle 2c+1 to corner c+1. Corner c therefore "owns" triangles 2c and
2c-1 (wrapping around), which is how nodal shares of areas, volumes and
hat-function integrals are computed.
"""

from typing import Optional

import numpy as np

from .primitives import face_centroid, triangle_areas


def tessellate_face(
    corners,
    skip_if_tri: bool = True,
    centroid: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Split a face into triangles fanned from its centroid.

    Parameters:
    -----------
    corners : array_like
        Corner coordinates, shape (N, dim), consecutive around the face.
        The first corner is not repeated at the end.
    skip_if_tri : bool
        If True and the face is already a triangle, return it unchanged
        (no centroid is computed).
    centroid : np.ndarray, optional
        Precomputed face centroid. Computed from the corners if omitted.

    Returns:
    --------
    np.ndarray
        Triangles, shape (2N, 3, dim), or (1, 3, dim) for a skipped triangle.
    """
    corners = np.asarray(corners, dtype=float)
    n = corners.shape[0]

    if skip_if_tri and n == 3:
        return corners[None, :, :].copy()

    center = face_centroid(corners) if centroid is None else np.asarray(centroid, dtype=float)
    nxt = np.roll(corners, -1, axis=0)
    mid = 0.5 * (corners + nxt)
    center = np.broadcast_to(center, corners.shape)

    tris = np.empty((2 * n, 3, corners.shape[1]), dtype=float)
    tris[0::2] = np.stack([center, corners, mid], axis=1)
    tris[1::2] = np.stack([center, mid, nxt], axis=1)
    return tris


def corner_tributary_areas(corners) -> np.ndarray:
    """
    Area of the face attributed to each corner.

    Corner c gets the areas of triangles 2c and 2c-1 of the tessellation;
    the result sums to the face area.
    """
    n = len(corners)
    areas = triangle_areas(tessellate_face(corners, skip_if_tri=False))
    result = np.zeros(n, dtype=float)
    result += areas[0::2]                       # triangle 2c   -> corner c
    result += np.roll(areas[1::2], 1)           # triangle 2c+1 -> corner c+1
    return result


def face_integral(corners, corner_values=None) -> float:
    """
    Integrate a corner-interpolated function over a face.

    With no corner values the function is 1 everywhere and the result is
    the face area. With a one-hot vector of corner values, the result is
    the integral of that corner's hat basis function over the face.

    Parameters:
    -----------
    corners : array_like
        Corner coordinates, shape (N, 2) or (N, 3)
    corner_values : array_like, optional
        One value per corner

    Returns:
    --------
    float
        The approximate integral over the face
    """
    areas = triangle_areas(tessellate_face(corners, skip_if_tri=False))
    if corner_values is None:
        return float(areas.sum())

    values = np.asarray(corner_values, dtype=float)
    return float(np.dot(areas[0::2], values) + np.dot(areas[1::2], np.roll(values, -1)))
