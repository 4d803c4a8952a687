# polyvem/geometry - Cell geometry for polygonal and polyhedral cells
"""
GEOMETRY: POINTS, FACES AND CELLS
=================================

    primitives.py     point arithmetic, Heron area, tetrahedron volume, centroids
    tessellation.py   face tessellation, face integrals, corner tributary areas
    cell.py           normals, orientation check, star point, volume, centroid
"""

from .primitives import (
    plc,
    point_sum,
    point_diff,
    point_mean,
    norm,
    point_average,
    pick_points,
    triangle_area,
    triangle_areas,
    triangle_normal,
    determinant_3d,
    tetrahedron_volume,
    centroid_2d,
    centroid_2d_3d,
    face_centroid,
)
from .tessellation import tessellate_face, face_integral, corner_tributary_areas
from .cell import (
    compute_face_geometry,
    compute_cell_geometry,
    identify_star_point,
    inward_pointing_normals,
    is_behind_face,
    is_star_point,
)

__all__ = [
    'plc', 'point_sum', 'point_diff', 'point_mean', 'norm', 'point_average',
    'pick_points', 'triangle_area', 'triangle_areas', 'triangle_normal',
    'determinant_3d', 'tetrahedron_volume', 'centroid_2d', 'centroid_2d_3d',
    'face_centroid',
    'tessellate_face', 'face_integral', 'corner_tributary_areas',
    'compute_face_geometry', 'compute_cell_geometry', 'identify_star_point',
    'inward_pointing_normals', 'is_behind_face', 'is_star_point',
]
