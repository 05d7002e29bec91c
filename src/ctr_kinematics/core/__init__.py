"""Core data structures for ctr_kinematics.

This module provides the immutable tube and robot models, the evaluation
options and the forward-kinematics result container.
"""

from .config import ABSENT, CURVED, STRAIGHT
from .options import ComplianceMode, SolverOptions
from .result import KinematicsResult
from .robot_model import ConcentricTubeRobot, Tube, second_moment_of_area

__all__ = [
    "ABSENT",
    "CURVED",
    "STRAIGHT",
    "ComplianceMode",
    "SolverOptions",
    "KinematicsResult",
    "ConcentricTubeRobot",
    "Tube",
    "second_moment_of_area",
]
