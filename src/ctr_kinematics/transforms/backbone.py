"""Default chain integrator: backbone frames of one tube from its arc sequence."""

import jax
import jax.numpy as jnp

from . import se3, so3

Array = jax.Array


def arc_transform(arc: Array) -> Array:
    """Transform across one (curvature, relative rotation, length) arc.

    The bend plane is first rotated about the local tangent, then the frame
    follows a circular arc in the rotated x-z plane.
    """
    k, phi, s = arc[..., 0], arc[..., 1], arc[..., 2]
    plane = se3.from_position_and_rotation(jnp.zeros(phi.shape + (3,), dtype=arc.dtype), so3.rot_z(phi))
    return plane @ se3.arc(k, s)


def integrate_arcs(arcs: Array, base: Array = None) -> Array:
    """Compose arc transforms from the base of a tube to its tip.

    Args:
        arcs: (m, 3) arc sequence of one tube
        base: Optional (4, 4) base frame, identity by default

    Returns:
        (m + 1, 4, 4) frames at the base and at the end of every arc
    """
    arcs = jnp.asarray(arcs, dtype=jnp.float64)
    if base is None:
        base = jnp.eye(4, dtype=arcs.dtype)
    base = jnp.asarray(base, dtype=arcs.dtype)

    def scan_body(T_world, arc):
        T_next = T_world @ arc_transform(arc)
        return T_next, T_next

    _, frames = jax.lax.scan(scan_body, base, arcs)
    return jnp.concatenate([base[None], frames], axis=0)


def backbone_points(frames: Array) -> Array:
    """Positions (m + 1, 3) of integrated backbone frames."""
    return se3.get_position(frames)
