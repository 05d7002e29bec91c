"""Per-tube arc sequences from per-segment curvature and bend angle."""

import jax
import jax.numpy as jnp

from ..core.config import ABSENT

Array = jax.Array


def relative_rotations(bend_angles: Array) -> Array:
    """Rotation of each segment's bend plane relative to the previous segment.

    The running angle starts at zero and always tracks the last segment's
    absolute angle, so the relative rotations sum back to the absolute angle.
    """
    def step(running, absolute):
        return absolute, absolute - running

    _, relative = jax.lax.scan(step, jnp.zeros((), dtype=bend_angles.dtype), bend_angles)
    return relative


def build_arcs(segment_lengths: Array, curvatures: Array, bend_angles: Array, status: Array) -> Array:
    """Turn segment values into every tube's (curvature, relative rotation, length) arcs.

    Args:
        segment_lengths: (2n,) segment lengths, base to tip
        curvatures: (2n,) equivalent curvature of each segment
        bend_angles: (2n,) absolute bend-plane angle of each segment
        status: (2n, n) overlap status matrix

    Returns:
        (n, 2n, 3) array; arcs where the tube is absent or the segment is empty
        carry zero curvature and zero length.
    """
    segment_lengths = jnp.asarray(segment_lengths)
    status = jnp.asarray(status)
    relative = relative_rotations(jnp.asarray(bend_angles))

    # (n, 2n): a tube only bends or extends where it is present
    occupied = (status.T != ABSENT) & (segment_lengths[None, :] > 0.0)
    k = jnp.where(occupied, curvatures[None, :], 0.0)
    s = jnp.where(occupied, segment_lengths[None, :], 0.0)
    phi = jnp.broadcast_to(relative[None, :], k.shape)

    return jnp.stack([k, phi, s], axis=-1)
