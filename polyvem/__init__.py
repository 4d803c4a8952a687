# polyvem - Virtual Element Method for linear elasticity on polygonal/polyhedral meshes
"""
POLYVEM: Virtual Element Assembly for Linear Elasticity
=======================================================

This package provides:
- Cell geometry for arbitrary (also non-convex) polygons and polyhedra
- First-order VEM stiffness matrices (Gain et al. 2014)
- Global assembly into a triplet list with body forces, tractions and
  Dirichlet conditions (reduction or trivial equations)
- Stress recovery and pressure-gradient nodal forces

ARCHITECTURE:
-------------
    kernel/         Dimension-agnostic plumbing (dofs, triplets, boundary, linalg)
    geometry/       Points, face tessellation, cell geometry engine
    model.py        Mesh containers, StabilityChoice, CellGeometry
    basis.py        Nr, Nc, Wr, Wc, q and I - P
    material.py     Elasticity matrix D
    stability.py    Stability term S
    elements.py     Cell stiffness matrices
    loads.py        Body-force and traction distribution
    assembly.py     Global system drivers (2D / 3D)
    post.py         Stress recovery, potential-gradient force
    generative/     Structured mesh generators
    viz.py          2D plotting

The package never solves the system; hand `system.to_sparse()` and
`system.rhs` to a sparse solver such as scipy.sparse.linalg.spsolve.
"""

from .errors import (
    VEMError,
    InvalidArgumentError,
    GeometryError,
    StarPointError,
    InwardNormalsError,
)
from .model import PolygonMesh, PolyhedralMesh, CellGeometry, StabilityChoice
from .config import CONFIG, VEMConfig
from .kernel import (
    Triplets,
    LinearSystem,
    reduce_system,
    set_boundary_conditions,
    expand_reduced_solution,
    sparse_to_full,
    format_matrix,
)
from .geometry import compute_cell_geometry, face_integral, tessellate_face
from .material import elasticity_matrix
from .stability import stability_term
from .elements import LocalStiffness, stiffness_matrix_2d, stiffness_matrix_3d
from .assembly import assemble_mech_system_2d, assemble_mech_system_3d
from .post import StressResult, compute_stress_2d, compute_stress_3d, potential_gradient_force_3d
from .logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    'VEMError', 'InvalidArgumentError', 'GeometryError', 'StarPointError',
    'InwardNormalsError',
    'PolygonMesh', 'PolyhedralMesh', 'CellGeometry', 'StabilityChoice',
    'CONFIG', 'VEMConfig',
    'Triplets', 'LinearSystem', 'reduce_system', 'set_boundary_conditions',
    'expand_reduced_solution', 'sparse_to_full', 'format_matrix',
    'compute_cell_geometry', 'face_integral', 'tessellate_face',
    'elasticity_matrix', 'stability_term',
    'LocalStiffness', 'stiffness_matrix_2d', 'stiffness_matrix_3d',
    'assemble_mech_system_2d', 'assemble_mech_system_3d',
    'StressResult', 'compute_stress_2d', 'compute_stress_3d',
    'potential_gradient_force_3d',
    'setup_logging',
]
