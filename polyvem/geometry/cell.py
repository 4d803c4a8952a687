# polyvem/geometry/cell.py
"""
CELL GEOMETRY ENGINE
====================

PURPOSE:
--------
Given the corners of one polyhedral cell and its faces (in local corner
numbering), compute:

    - an outward unit normal per face
    - a centroid per face
    - a STAR POINT: a point from which every face is visible
    - the cell volume and centroid

ALGORITHM:
----------
1. Face normals: tessellate each face and sum the (area-scaled) triangle
   normals. Summing over the tessellation area-weights the normal, which
   copes with slightly warped faces.

2. Orientation check: with m the mean of the face centroids, outward
   normals give sum_f (c_f - m) . n_f >= 0. A negative sum means the face
   corner ordering of the caller is reversed; this is reported as an
   InwardNormalsError rather than silently flipped.

3. Star point: start from the coordinate mean of the corners and cycle
   through the faces. Whenever the point is in front of a face plane,
   project it onto the plane and push it 10% further behind. Stop once
   every face in a full cycle reports the point behind it.

4. Volume/centroid: split the cell into tetrahedra (star point + each
   tessellation triangle). Their unsigned volumes sum to the cell volume
   because every face is visible from the star point.

5. If the cell centroid also qualifies as a star point, it replaces the
   iteratively found one.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..config import CONFIG
from ..errors import InwardNormalsError, StarPointError
from ..model import CellGeometry
from .primitives import face_centroid, point_average, tetrahedron_volume, triangle_normal
from .tessellation import tessellate_face

logger = logging.getLogger(__name__)


def compute_face_geometry(face_points) -> tuple[np.ndarray, np.ndarray]:
    """
    Unit normal and centroid of a face embedded in 3D.

    Returns:
    --------
    (normal, centroid) : tuple of np.ndarray, each shape (3,)
    """
    face_points = np.asarray(face_points, dtype=float)
    centroid = face_centroid(face_points)
    tris = tessellate_face(face_points, skip_if_tri=False, centroid=centroid)

    normal = triangle_normal(tris[:, 0], tris[:, 1], tris[:, 2]).sum(axis=0)
    return normal / np.linalg.norm(normal), centroid


def inward_pointing_normals(normals: np.ndarray, face_centroids: np.ndarray) -> bool:
    """
    True if the normals point into the polyhedron rather than out of it.

    Uses the mean of the face centroids as a stand-in for the cell centre,
    which stays meaningful for slightly non-planar faces. Pathological
    shapes may still fool it.
    """
    mean_point = point_average(face_centroids)
    dists = face_centroids - mean_point
    return float(np.sum(dists * normals)) < 0


def is_behind_face(point, normal, centroid, tol: Optional[float] = None) -> bool:
    """True if `point` lies behind (inside) the plane of a face, within `tol`."""
    tol = CONFIG.star_point_tolerance if tol is None else tol
    return float(np.dot(np.asarray(centroid) - np.asarray(point), normal)) + tol > 0


def is_star_point(point, normals: np.ndarray, face_centroids: np.ndarray,
                  tol: Optional[float] = None) -> bool:
    """True if `point` is behind every face plane of the cell."""
    return all(
        is_behind_face(point, n, c, tol) for n, c in zip(normals, face_centroids)
    )


def identify_star_point(
    point,
    normals: np.ndarray,
    face_centroids: np.ndarray,
    tol: Optional[float] = None,
    iteration_factor: Optional[int] = None,
    overshoot: Optional[float] = None,
) -> np.ndarray:
    """
    Find a point relative to which the cell is star-shaped.

    The normals must be UNIT normals. Faces are treated as planar.

    Parameters:
    -----------
    point : array_like
        Starting guess, typically the coordinate mean of the cell corners
    normals : np.ndarray
        Outward unit normals, shape (num_faces, 3)
    face_centroids : np.ndarray
        Face centroids, shape (num_faces, 3)
    tol, iteration_factor, overshoot :
        Override CONFIG.star_point_tolerance / _iteration_factor / _overshoot

    Returns:
    --------
    np.ndarray
        The star point, shape (3,)

    Raises:
    -------
    StarPointError
        If the iteration budget (iteration_factor * num_faces) is exhausted
    """
    tol = CONFIG.star_point_tolerance if tol is None else tol
    iteration_factor = CONFIG.star_point_iteration_factor if iteration_factor is None else iteration_factor
    overshoot = CONFIG.star_point_overshoot if overshoot is None else overshoot

    num_faces = len(normals)
    max_iter = iteration_factor * num_faces

    result = np.array(point, dtype=float)
    count = 0
    for i in range(max_iter):
        f = i % num_faces
        if not is_behind_face(result, normals[f], face_centroids[f], tol):
            count = 0
            # signed distance in front of the plane; move slightly past it
            proj = float(np.dot(result - face_centroids[f], normals[f]))
            result -= overshoot * proj * normals[f]

        count += 1
        if count == num_faces:
            break

    if count != num_faces:
        raise StarPointError(
            f"Unable to find a star point for cell with {num_faces} faces "
            f"after {max_iter} iterations (last candidate {result.tolist()})."
        )
    return result


def compute_cell_geometry(
    corners,
    faces: Sequence[Sequence[int]],
    tol: Optional[float] = None,
) -> CellGeometry:
    """
    Compute normals, face centroids, star point, volume and centroid of a cell.

    Parameters:
    -----------
    corners : array_like
        Coordinates of the cell's corners, shape (num_corners, 3)
    faces : sequence of sequences of int
        Faces in LOCAL corner numbering (indices into `corners`), each
        ordered counter-clockwise when seen from outside the cell
    tol : float, optional
        Star-point tolerance (defaults to CONFIG.star_point_tolerance)

    Returns:
    --------
    CellGeometry

    Raises:
    -------
    InwardNormalsError
        If the faces are oriented so that the normals point inward
    StarPointError
        If no star point can be found (non-star-shaped or degenerate cell)
    """
    corners = np.asarray(corners, dtype=float)
    num_faces = len(faces)

    normals = np.empty((num_faces, 3), dtype=float)
    face_centroids = np.empty((num_faces, 3), dtype=float)
    for f, face in enumerate(faces):
        normals[f], face_centroids[f] = compute_face_geometry(corners[np.asarray(face)])

    if inward_pointing_normals(normals, face_centroids):
        raise InwardNormalsError(
            f"Face normals of cell with {num_faces} faces point inward; "
            "face corners must be ordered counter-clockwise seen from outside."
        )

    # usually the corner mean qualifies, but not necessarily
    star_point = identify_star_point(point_average(corners), normals, face_centroids, tol)

    volume = 0.0
    centroid = np.zeros(3, dtype=float)
    for face in faces:
        for tri in tessellate_face(corners[np.asarray(face)]):
            tvol = tetrahedron_volume(tri[0], tri[1], tri[2], star_point)
            tet_centroid = (tri.sum(axis=0) + star_point) / 4.0
            volume += tvol
            centroid += tvol * tet_centroid
    centroid /= volume

    if is_star_point(centroid, normals, face_centroids, tol):
        star_point = centroid.copy()
    else:
        logger.debug("Cell centroid %s is not a star point; keeping %s",
                     centroid, star_point)

    return CellGeometry(
        normals=normals,
        face_centroids=face_centroids,
        centroid=centroid,
        star_point=star_point,
        volume=volume,
    )
