# polyvem/geometry/primitives.py
"""
GEOMETRIC PRIMITIVES
====================

Small, dimension-agnostic kernels used everywhere else:

- point arithmetic (linear combination, sum, difference, mean, norm)
- triangle area by Heron's formula (works in 2D and 3D, unsigned)
- triangle normal (3D only, cross product of two edges)
- tetrahedron volume (unsigned)
- polygon centroids for planar faces in 2D or embedded in 3D

Points are numpy arrays; the dimension is simply the length of the last axis.
"""

import numpy as np


def plc(p1, p2, fac1: float, fac2: float) -> np.ndarray:
    """Linear combination fac1 * p1 + fac2 * p2 of two points."""
    return fac1 * np.asarray(p1, dtype=float) + fac2 * np.asarray(p2, dtype=float)


def point_sum(p1, p2) -> np.ndarray:
    return plc(p1, p2, 1.0, 1.0)


def point_diff(p1, p2) -> np.ndarray:
    return plc(p1, p2, 1.0, -1.0)


def point_mean(p1, p2) -> np.ndarray:
    return plc(p1, p2, 0.5, 0.5)


def norm(v) -> float:
    """L2 norm of a vector."""
    v = np.asarray(v, dtype=float)
    return float(np.sqrt(np.dot(v, v)))


def point_average(points) -> np.ndarray:
    """
    Coordinate mean of a set of points.

    Note that this is not the geometric centroid of the polygon or
    polyhedron the points are the corners of.
    """
    return np.asarray(points, dtype=float).mean(axis=0)


def pick_points(points: np.ndarray, indices) -> np.ndarray:
    """Return the rows of `points` listed in `indices`, in that order."""
    return points[np.asarray(indices, dtype=int)]


def triangle_area(c1, c2, c3) -> float:
    """
    Area of a triangle in any dimension, using Heron's formula.

    There is no notion of orientation, so the area is always >= 0.
    """
    l1 = norm(point_diff(c2, c1))
    l2 = norm(point_diff(c3, c2))
    l3 = norm(point_diff(c1, c3))
    s = 0.5 * (l1 + l2 + l3)
    # round-off can make the product slightly negative for slivers
    return float(np.sqrt(max(s * (s - l1) * (s - l2) * (s - l3), 0.0)))


def triangle_areas(tris: np.ndarray) -> np.ndarray:
    """
    Vectorized Heron's formula.

    Parameters:
    -----------
    tris : np.ndarray
        Triangles, shape (T, 3, dim)

    Returns:
    --------
    np.ndarray
        Areas, shape (T,)
    """
    tris = np.asarray(tris, dtype=float)
    l1 = np.linalg.norm(tris[:, 1] - tris[:, 0], axis=1)
    l2 = np.linalg.norm(tris[:, 2] - tris[:, 1], axis=1)
    l3 = np.linalg.norm(tris[:, 0] - tris[:, 2], axis=1)
    s = 0.5 * (l1 + l2 + l3)
    return np.sqrt(np.maximum(s * (s - l1) * (s - l2) * (s - l3), 0.0))


def triangle_normal(c1, c2, c3) -> np.ndarray:
    """
    Normal of a triangle in 3D, scaled by (twice) its area.

    The direction follows the right-hand rule on the corner order c1 -> c2 -> c3.
    Also accepts stacked corners of shape (T, 3) and returns (T, 3) normals.
    """
    c1 = np.asarray(c1, dtype=float)
    return np.cross(np.asarray(c2, dtype=float) - c1, np.asarray(c3, dtype=float) - c1)


def determinant_3d(c1, c2, c3) -> float:
    """Determinant of the 3x3 matrix with rows (or columns) c1, c2, c3."""
    return float(
        c1[0] * (c2[1] * c3[2] - c2[2] * c3[1])
        - c1[1] * (c2[0] * c3[2] - c2[2] * c3[0])
        + c1[2] * (c2[0] * c3[1] - c2[1] * c3[0])
    )


def tetrahedron_volume(p1, p2, p3, p4) -> float:
    """Unsigned volume of the tetrahedron with corners p1..p4."""
    v1 = point_diff(p1, p4)
    v2 = point_diff(p2, p4)
    v3 = point_diff(p3, p4)
    return abs(determinant_3d(v1, v2, v3)) / 6.0


def centroid_2d(points) -> np.ndarray:
    """
    Centroid of a simple polygon in the plane.

    Uses the shoelace-weighted formula

        C_d = 1/(6A) * sum_i (d_i + d_{i+1}) (x_i y_{i+1} - x_{i+1} y_i)

    with A the signed area, so any simple polygon (also non-convex) works.
    """
    pts = np.asarray(points, dtype=float)
    nxt = np.roll(pts, -1, axis=0)
    cross = pts[:, 0] * nxt[:, 1] - nxt[:, 0] * pts[:, 1]
    area = 0.5 * cross.sum()
    return ((pts + nxt) * cross[:, None]).sum(axis=0) / (6.0 * area)


def centroid_2d_3d(points) -> np.ndarray:
    """
    Centroid of a planar polygon embedded in 3D.

    The polygon is fanned into triangles from its coordinate mean and the
    triangle centroids are averaged, weighted by area. Strongly non-convex
    faces (where the mean lies outside the polygon) give an approximate
    point, which still lies in the face plane.
    """
    pts = np.asarray(points, dtype=float)
    inside = point_average(pts)
    nxt = np.roll(pts, -1, axis=0)
    tris = np.stack([pts, nxt, np.broadcast_to(inside, pts.shape)], axis=1)
    areas = triangle_areas(tris)
    tri_centroids = tris.mean(axis=1)
    return (areas[:, None] * tri_centroids).sum(axis=0) / areas.sum()


def face_centroid(points) -> np.ndarray:
    """Centroid of a planar face, in 2D or embedded in 3D."""
    pts = np.asarray(points, dtype=float)
    if pts.shape[1] == 2:
        return centroid_2d(pts)
    return centroid_2d_3d(pts)
