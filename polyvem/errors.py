# polyvem/errors.py
"""Exceptions raised by the VEM assembly core."""


class VEMError(Exception):
    """Base class for all errors raised by polyvem."""
    pass


class InvalidArgumentError(VEMError, ValueError):
    """Raised for malformed input (unsorted Dirichlet dofs, bad shapes, ...)."""
    pass


class GeometryError(VEMError, RuntimeError):
    """Raised when a cell's geometry cannot be processed."""
    pass


class StarPointError(GeometryError):
    """Raised when no point is found from which the whole cell is visible."""
    pass


class InwardNormalsError(GeometryError):
    """Raised when the face normals of a cell point into the cell."""
    pass
