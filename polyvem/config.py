# polyvem/config.py
"""
Numerical constants and defaults.
"""

from dataclasses import dataclass

from .model import StabilityChoice


@dataclass
class VEMConfig:
    """Global configuration of the VEM core."""

    # Star-point search (cell geometry engine)
    star_point_tolerance: float = 1e-13
    star_point_iteration_factor: int = 20   # budget = factor * num_faces
    star_point_overshoot: float = 1.1       # push past the violated plane by this factor

    # Assembly defaults
    default_stability: StabilityChoice = StabilityChoice.SIMPLE
    reduce_boundary: bool = True


# Global config instance
CONFIG = VEMConfig()
