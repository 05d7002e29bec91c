"""I/O utilities for loading tube sets from files.

This module parses XML tube-set descriptions into the immutable data
structures used by the kinematics.
"""

from .tube_parser import load_robot, load_solver_options, load_tubes

__all__ = ["load_robot", "load_solver_options", "load_tubes"]
