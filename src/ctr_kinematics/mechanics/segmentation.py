"""Overlap segmentation of the shared backbone.

The backbone starts at the robot's base reference plane (s = 0). A tube with
translation t has its tip at s = t and its curved section over
[max(t - Lc, 0), t]; whatever lies behind the plane is not part of the
backbone. The 2n curved-start and tip events, sorted, split [0, max tip] into
2n contiguous segments over which every tube is curved, straight or absent.
"""

import logging
from typing import Tuple

import jax
import jax.numpy as jnp
import numpy as np

from ..core.config import ABSENT, CURVED, STRAIGHT
from ..core.robot_model import ConcentricTubeRobot
from ..errors import SegmentationContractError

Array = jax.Array

logger = logging.getLogger(__name__)

# Order in which a tube's status may change along the backbone
_STATUS_RANK = {STRAIGHT: 0, CURVED: 1, ABSENT: 2}


def segment(robot: ConcentricTubeRobot, translations: Array) -> Tuple[Array, Array]:
    """Split the backbone into the 2n overlap segments.

    Args:
        robot: Tube set, innermost first
        translations: (n,) insertion depth of each tube past the base plane

    Returns:
        segment_lengths: (2n,) non-negative lengths ordered base to tip
        status: (2n, n) int32 codes, CURVED / STRAIGHT / ABSENT
    """
    tips = jnp.asarray(translations, dtype=jnp.float64)
    curve_starts = jnp.maximum(tips - robot.curved_length, 0.0)

    events = jnp.concatenate([curve_starts, tips])
    breakpoints = events[jnp.argsort(events, stable=True)]
    segment_lengths = jnp.diff(breakpoints, prepend=0.0)

    # A segment takes the status each tube has just before its far end
    ends = breakpoints[:, None]
    status = jnp.where(
        ends <= curve_starts[None, :],
        STRAIGHT,
        jnp.where(ends <= tips[None, :], CURVED, ABSENT),
    ).astype(jnp.int32)

    return segment_lengths, status


def check_segmentation(segment_lengths, status, num_tubes: int) -> Tuple[np.ndarray, np.ndarray]:
    """Verify a segmenter's output against the overlap contract.

    Args:
        segment_lengths: Lengths returned by the segmenter
        status: Status matrix returned by the segmenter
        num_tubes: Number of tubes in the robot

    Returns:
        The lengths and status as host numpy arrays

    Raises:
        SegmentationContractError: if shapes, codes or lengths are invalid, or a
            tube reappears after its tip or turns straight after being curved.
    """
    lengths = np.asarray(segment_lengths, dtype=np.float64)
    codes = np.asarray(status)
    num_segments = 2 * num_tubes

    if lengths.shape != (num_segments,):
        raise SegmentationContractError(
            f"Expected {num_segments} segment lengths, got shape {lengths.shape}"
        )
    if codes.shape != (num_segments, num_tubes):
        raise SegmentationContractError(
            f"Expected status matrix of shape {(num_segments, num_tubes)}, got {codes.shape}"
        )
    if not np.all(np.isfinite(lengths)) or np.any(lengths < 0.0):
        raise SegmentationContractError(f"Segment lengths must be finite and non-negative: {lengths.tolist()}")

    unknown = set(np.unique(codes).tolist()) - set(_STATUS_RANK)
    if unknown:
        raise SegmentationContractError(f"Unknown overlap status codes: {sorted(unknown)}")

    ranks = np.vectorize(_STATUS_RANK.get)(codes)
    for tube in range(num_tubes):
        steps = np.diff(ranks[:, tube])
        if np.any(steps < 0):
            seg = int(np.argmax(steps < 0)) + 1
            raise SegmentationContractError(
                f"Tube {tube} goes from status {int(codes[seg - 1, tube])} to "
                f"{int(codes[seg, tube])} at segment {seg}; a tube's extent must be "
                "straight, then curved, then absent"
            )

    logger.debug("Segment lengths %s", lengths.tolist())
    return lengths, codes.astype(np.int32)
