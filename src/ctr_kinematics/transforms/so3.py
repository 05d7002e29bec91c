"""SO(3) rotations used to orient bend planes along the backbone.

All functions are pure, JIT-able and broadcast over leading batch axes.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def skew_symmetric(v: Array) -> Array:
    """
    Cross-product matrix [v]_x of a 3-vector.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zero = jnp.zeros(v.shape[:-1], dtype=v.dtype)
    x, y, z = v[..., 0], v[..., 1], v[..., 2]

    return jnp.stack([
        jnp.stack([zero, -z, y], axis=-1),
        jnp.stack([z, zero, -x], axis=-1),
        jnp.stack([-y, x, zero], axis=-1),
    ], axis=-2)


def exp(rotvec: Array) -> Array:
    """
    Rotation matrix of an axis-angle vector (Rodrigues' formula).

    R = I + sin(theta)/theta [w]_x + (1 - cos(theta))/theta^2 [w]_x^2,
    with Taylor coefficients near theta = 0.

    Args:
        rotvec: (..., 3) axis-angle vectors

    Returns:
        (..., 3, 3) rotation matrices
    """
    theta = jnp.linalg.norm(rotvec, axis=-1)[..., None, None]
    small = theta < 1e-8
    safe = jnp.where(small, 1.0, theta)

    a = jnp.where(small, 1.0 - theta**2 / 6.0, jnp.sin(safe) / safe)
    b = jnp.where(small, 0.5 - theta**2 / 24.0, (1.0 - jnp.cos(safe)) / safe**2)

    K = skew_symmetric(rotvec)
    I = jnp.broadcast_to(jnp.eye(3, dtype=rotvec.dtype), K.shape)
    return I + a * K + b * jnp.matmul(K, K)


def rot_z(angle: Array) -> Array:
    """
    Rotation about the local z (backbone tangent) axis.

    Args:
        angle: (...) angles in radians

    Returns:
        (..., 3, 3) rotation matrices
    """
    angle = jnp.asarray(angle)
    c, s = jnp.cos(angle), jnp.sin(angle)
    zero = jnp.zeros_like(angle)
    one = jnp.ones_like(angle)

    return jnp.stack([
        jnp.stack([c, -s, zero], axis=-1),
        jnp.stack([s, c, zero], axis=-1),
        jnp.stack([zero, zero, one], axis=-1),
    ], axis=-2)
