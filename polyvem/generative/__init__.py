# polyvem/generative - Structured mesh generators
"""
GENERATIVE: Mesh Generators
===========================

Simple structured meshes in the layout the assembly expects.

USAGE:
------
    from polyvem.generative import rectangle_mesh, boundary_edges_2d

    mesh = rectangle_mesh(nx=4, ny=2, lx=2.0, ly=1.0, jitter=0.1, seed=0)
    right_edges = boundary_edges_2d(mesh, axis=0, value=2.0)
"""

from .meshes import (
    HEX_FACES,
    rectangle_mesh,
    box_mesh,
    points_on_plane,
    boundary_edges_2d,
    boundary_faces_3d,
)

__all__ = [
    'HEX_FACES', 'rectangle_mesh', 'box_mesh',
    'points_on_plane', 'boundary_edges_2d', 'boundary_faces_3d',
]
