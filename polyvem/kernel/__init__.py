# polyvem/kernel - Dimension-agnostic assembly plumbing
"""
KERNEL: THE DIMENSION-AGNOSTIC FOUNDATION
=========================================

Everything here works for 2D and 3D cells alike. Assembly and boundary
handling don't care about dimension; they just need:
- A way to map (point_id, component) -> global_dof_index
- Cell stiffness matrices (any size)
- Fixed dof lists and prescribed values
- Load vectors

The VEM-specific pieces (basis matrices, stiffness, loads) live one level up.
"""

from .dof import DOFManager, LocalIndexing, DOF_2D, DOF_3D, dof_manager
from .assemble import (
    Triplets,
    TripletBuilder,
    LinearSystem,
    add_to_vector,
    sparse_to_full,
    format_matrix,
)
from .boundary import reduce_system, set_boundary_conditions, expand_reduced_solution
from .linalg import matmul, trace, diag_elems, inverse_trace, identity_matrix

__all__ = [
    'DOFManager', 'LocalIndexing', 'DOF_2D', 'DOF_3D', 'dof_manager',
    'Triplets', 'TripletBuilder', 'LinearSystem', 'add_to_vector',
    'sparse_to_full', 'format_matrix',
    'reduce_system', 'set_boundary_conditions', 'expand_reduced_solution',
    'matmul', 'trace', 'diag_elems', 'inverse_trace', 'identity_matrix',
]
