"""Mechanics of nested pre-curved tubes.

- segmentation: overlap segments and tube status along the backbone
- superposition: equivalent curvature of each segment
- torsion: delivered rotations with torsionally compliant shafts
- arcs: per-tube arc sequences
"""

from .arcs import build_arcs, relative_rotations
from .segmentation import check_segmentation, segment
from .superposition import superpose_curvature, superpose_segments
from .torsion import pair_coupling, solve_delivered_rotations, torque_residual, torsional_compliance

__all__ = [
    "build_arcs",
    "relative_rotations",
    "check_segmentation",
    "segment",
    "superpose_curvature",
    "superpose_segments",
    "pair_coupling",
    "solve_delivered_rotations",
    "torque_residual",
    "torsional_compliance",
]
