"""
Rigid-body transforms and backbone chain integration.

- so3: rotations (Rodrigues map, rotations about the tangent)
- se3: homogeneous transforms, twist exponential, circular-arc transforms
- backbone: default per-tube chain integrator
"""

from . import so3
from . import se3
from .backbone import integrate_arcs

__all__ = [
    "so3",
    "se3",
    "integrate_arcs",
]
