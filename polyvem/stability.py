# polyvem/stability.py
"""
STABILITY TERM
==============

The consistency part V Wc D Wc^T of the VEM stiffness only sees the linear
part of a displacement field. The stability term S, applied through
(I - P)^T S (I - P), gives the remaining (non-linear) modes some stiffness
so that the cell matrix has exactly the rigid-body null space.

Three recipes:

    SIMPLE     S = alpha I,  alpha = V tr(D) / tr(Nc^T Nc)
               (Gain et al. 2014)
    HARMONIC   S = alpha I,  alpha = (1/9) V tr(D) tr((Nc^T Nc)^-1)
               (Andersen et al. 2017)
    D_RECIPE   S = diag(max(h, (V Wc D Wc^T)_ii)),  h = V^(1/3)
"""

from typing import Optional

import numpy as np

from .errors import InvalidArgumentError
from .kernel.linalg import diag_elems, identity_matrix, inverse_trace, matmul, trace
from .model import StabilityChoice


def stability_term(
    choice: StabilityChoice,
    nc: np.ndarray,
    d: np.ndarray,
    volume: float,
    consistent: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Diagonal stability matrix S of one cell.

    Parameters:
    -----------
    choice : StabilityChoice
        Which recipe to use
    nc : np.ndarray
        Nc of the cell, shape (dim*N, lsdim)
    d : np.ndarray
        Elasticity matrix, shape (lsdim, lsdim)
    volume : float
        Cell volume (area in 2D)
    consistent : np.ndarray, optional
        V Wc D Wc^T, required by D_RECIPE

    Returns:
    --------
    np.ndarray
        S, shape (dim*N, dim*N)
    """
    choice = StabilityChoice(choice)
    n = nc.shape[0]

    if choice is StabilityChoice.D_RECIPE:
        if consistent is None:
            raise InvalidArgumentError("D_RECIPE stability needs the consistent stiffness V Wc D Wc^T")
        # cell diameter scales with the cube root of the volume
        h = np.cbrt(volume)
        return np.diag(np.maximum(h, diag_elems(consistent)))

    ntn = matmul(nc, nc, transpose_a=True)
    if choice is StabilityChoice.SIMPLE:
        alpha = volume * trace(d) / trace(ntn)
    else:
        alpha = (1.0 / 9.0) * volume * trace(d) * inverse_trace(ntn)
    return identity_matrix(alpha, n)
