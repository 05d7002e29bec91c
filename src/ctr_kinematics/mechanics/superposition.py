"""Equivalent curvature of an overlap segment by elastic superposition.

Every tube present in a segment shares one centerline. Following the
Euler-Bernoulli superposition of Webster et al. (2009), the resulting
curvature vector is the bending-stiffness weighted average of the
pre-curvature vectors of the curved tubes, where straight tubes add stiffness
but no curvature:

    k = sum_curved(EI * kappa * [cos(theta), sin(theta)]) / sum_present(EI)
"""

from typing import Tuple

import jax
import jax.numpy as jnp

from ..core.config import ABSENT, CURVED

Array = jax.Array


def superpose_curvature(
    stiffness: Array, precurvature: Array, theta: Array, status: Array
) -> Tuple[Array, Array]:
    """Equivalent curvature and bend-plane angle of a single segment.

    Args:
        stiffness: (n,) bending stiffness E*I of each tube
        precurvature: (n,) pre-curvature of each tube
        theta: (n,) bend-plane rotation delivered to each tube
        status: (n,) overlap status of each tube in this segment

    Returns:
        k_eq: equivalent curvature magnitude
        phi_eq: bend-plane angle in (-pi, pi]; 0 when the curvature vanishes
    """
    curved = (status == CURVED).astype(stiffness.dtype)
    present = (status != ABSENT).astype(stiffness.dtype)

    moment = stiffness * precurvature * curved
    total_stiffness = jnp.sum(stiffness * present)

    # No tube occupies the segment: a straight, zero-curvature gap
    occupied = total_stiffness > 0.0
    denominator = jnp.where(occupied, total_stiffness, 1.0)
    kx = jnp.where(occupied, jnp.sum(moment * jnp.cos(theta)) / denominator, 0.0)
    ky = jnp.where(occupied, jnp.sum(moment * jnp.sin(theta)) / denominator, 0.0)

    k_eq = jnp.sqrt(kx**2 + ky**2)
    phi_eq = jnp.arctan2(ky, kx)
    return k_eq, phi_eq


def superpose_segments(
    stiffness: Array, precurvature: Array, theta: Array, status: Array
) -> Tuple[Array, Array]:
    """Equivalent curvature and bend-plane angle for every segment.

    Args:
        stiffness: (n,) bending stiffness of each tube
        precurvature: (n,) pre-curvature of each tube
        theta: (n,) delivered rotation of each tube
        status: (2n, n) overlap status matrix

    Returns:
        curvatures: (2n,) equivalent curvatures
        bend_angles: (2n,) absolute bend-plane angles
    """
    return jax.vmap(superpose_curvature, in_axes=(None, None, None, 0))(
        stiffness, precurvature, theta, jnp.asarray(status)
    )
