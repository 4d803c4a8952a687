# polyvem/material.py
"""
Isotropic linear-elastic material matrix.

The matrix D acts on the tensor strain components (the shear entries of
Wc^T u are eps_xy, not gamma_xy = 2 eps_xy). To keep the strain energy
right, the shear rows and columns of the usual Voigt matrix are doubled,
so the shear diagonal is 4 * mu = 2 (1 - 2 nu) * E / ((1 + nu)(1 - 2 nu)).
Stresses computed as D @ eps therefore carry doubled shear components,
which is why stress recovery halves them.

2D uses plane strain.
"""

import numpy as np

from .errors import InvalidArgumentError


def elasticity_matrix(young: float, poisson: float, dim: int) -> np.ndarray:
    """
    Elasticity matrix D for an isotropic material.

    Parameters:
    -----------
    young : float
        Young's modulus E [Pa]
    poisson : float
        Poisson's ratio nu, must lie in (-1, 0.5)
    dim : int
        2 (plane strain, 3x3) or 3 (6x6)

    Returns:
    --------
    np.ndarray
        D, shape (3, 3) or (6, 6)

    Examples:
    ---------
    >>> D = elasticity_matrix(1.0, 0.0, 2)
    >>> D[2, 2]
    2.0
    """
    if not (-1.0 < poisson < 0.5):
        raise InvalidArgumentError(f"Poisson's ratio must lie in (-1, 0.5), got {poisson}")

    fac = young / (1.0 + poisson) / (1.0 - 2.0 * poisson)
    nu = poisson
    shear = 2.0 * (1.0 - 2.0 * nu)

    if dim == 2:
        d = np.array([
            [1 - nu,     nu,  0.0],
            [    nu, 1 - nu,  0.0],
            [   0.0,    0.0, shear],
        ], dtype=float)
    elif dim == 3:
        d = np.zeros((6, 6), dtype=float)
        d[:3, :3] = nu
        d[[0, 1, 2], [0, 1, 2]] = 1 - nu
        d[[3, 4, 5], [3, 4, 5]] = shear
    else:
        raise InvalidArgumentError(f"Only dimensions 2 and 3 are supported, got {dim}")

    return fac * d
