"""SE(3) homogeneous transforms for backbone frames.

Twists are ordered [vx, vy, vz, wx, wy, wz] (linear part first).
"""

import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Assemble homogeneous transforms.

    Args:
        p: (..., 3) positions
        R: (..., 3, 3) rotation matrices

    Returns:
        (..., 4, 4) transforms
    """
    batch_shape = jnp.broadcast_shapes(p.shape[:-1], R.shape[:-2])
    p = jnp.broadcast_to(p, batch_shape + (3,))
    R = jnp.broadcast_to(R, batch_shape + (3, 3))

    T = jnp.zeros(batch_shape + (4, 4), dtype=jnp.result_type(p, R))
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(p)
    return T.at[..., 3, 3].set(1.0)


def exp(twist: Array) -> Array:
    """
    Transform reached by following a constant twist for unit time.

    The translation is V v with V = I + A [w]_x + B [w]_x^2, where
    A = (1 - cos t)/t^2 and B = (t - sin t)/t^3 switch to their Taylor series
    for small rotation angles t = |w|.

    Args:
        twist: (..., 6) twists

    Returns:
        (..., 4, 4) transforms
    """
    v, w = twist[..., :3], twist[..., 3:]
    t = jnp.linalg.norm(w, axis=-1)[..., None, None]
    small = t < 1e-6
    safe = jnp.where(small, 1.0, t)

    A = jnp.where(small, 0.5 - t**2 / 24.0, (1.0 - jnp.cos(safe)) / safe**2)
    B = jnp.where(small, 1.0 / 6.0 - t**2 / 120.0, (safe - jnp.sin(safe)) / safe**3)

    K = so3.skew_symmetric(w)
    I = jnp.broadcast_to(jnp.eye(3, dtype=twist.dtype), K.shape)
    V = I + A * K + B * jnp.matmul(K, K)

    p = jnp.einsum("...ij,...j->...i", V, v)
    return from_position_and_rotation(p, so3.exp(w))


def arc(curvature: Array, length: Array) -> Array:
    """
    Transform along a circular arc that starts tangent to z and bends toward +x.

    Args:
        curvature: (...) arc curvature
        length: (...) arc length

    Returns:
        (..., 4, 4) transforms from the start frame to the end frame
    """
    curvature = jnp.asarray(curvature)
    length = jnp.asarray(length)
    zero = jnp.zeros(jnp.broadcast_shapes(curvature.shape, length.shape), dtype=jnp.result_type(curvature, length))
    twist = jnp.stack([zero, zero, zero + length, zero, zero + curvature * length, zero], axis=-1)
    return exp(twist)


def get_position(T: Array) -> Array:
    """Translation part of (..., 4, 4) transforms."""
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    """Rotation part of (..., 4, 4) transforms."""
    return T[..., :3, :3]
