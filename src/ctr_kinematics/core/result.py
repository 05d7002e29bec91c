"""Immutable result of one forward-kinematics evaluation."""

from typing import Any, Tuple

import jax
from flax import struct

from .options import ComplianceMode

Array = jax.Array


@struct.dataclass
class KinematicsResult:
    """Everything computed for one joint configuration.

    Attributes:
        q: (n, 2) joint values (translation, rotation) the result was computed for.
        segment_lengths: (2n,) overlap segment lengths, base to tip.
        status: (2n, n) overlap status codes (1 curved, 0 straight, -1 absent).
        delivered_rotations: (n,) rotation reaching each curved section.
        curvatures: (2n,) equivalent curvature of each segment.
        bend_angles: (2n,) absolute bend-plane angle of each segment.
        arcs: (n, 2n, 3) per-tube arcs as (curvature, relative rotation, length).
        chains: One chain-integrator output per tube.
        mode: Compliance mode used. Static field.
    """
    q: Array
    segment_lengths: Array
    status: Array
    delivered_rotations: Array
    curvatures: Array
    bend_angles: Array
    arcs: Array
    chains: Tuple[Any, ...]
    mode: ComplianceMode = struct.field(pytree_node=False, default=ComplianceMode.RIGID)

    @property
    def num_tubes(self) -> int:
        return self.arcs.shape[0]

    def tube_arcs(self, index: int) -> Array:
        """Arc sequence (2n, 3) of tube ``index``."""
        return self.arcs[index]

    def tip_pose(self, index: int) -> Array:
        """Last frame of tube ``index``'s chain, for integrators returning (m, 4, 4) stacks."""
        chain = self.chains[index]
        if getattr(chain, "ndim", 0) != 3 or chain.shape[-2:] != (4, 4):
            raise TypeError("tip_pose needs a chain integrator that returns a (m, 4, 4) transform stack")
        return chain[-1]
