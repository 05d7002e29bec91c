"""
CTR Kinematics: shape of concentric tube continuum robots.

This library computes, for every tube of a concentric tube robot, the
sequence of circular arcs its backbone follows for given tube insertions and
rotations, using elastic superposition of the pre-curved tubes and an
optional torsional-compliance correction. Numerics are written with JAX.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import core
from . import io
from . import mechanics
from . import transforms
from .chain import forward_kinematics
from .core import ComplianceMode, ConcentricTubeRobot, KinematicsResult, SolverOptions, Tube
from .errors import (
    CTRError,
    InvalidConfigurationError,
    SegmentationContractError,
    TorsionSolveDivergenceError,
)

__version__ = "0.1.0"
__all__ = [
    "core",
    "io",
    "mechanics",
    "transforms",
    "forward_kinematics",
    "ComplianceMode",
    "ConcentricTubeRobot",
    "KinematicsResult",
    "SolverOptions",
    "Tube",
    "CTRError",
    "InvalidConfigurationError",
    "SegmentationContractError",
    "TorsionSolveDivergenceError",
]
