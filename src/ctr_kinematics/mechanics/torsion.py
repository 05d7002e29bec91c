"""Rotation delivered to the curved sections when the straight shafts twist.

A tube rotated by alpha at its base delivers a different angle psi to its
curved section because the curved sections of neighbouring tubes push against
each other and the straight shaft twists like a torsion spring of stiffness
c = G J / Ls. For each adjacent pair (i, i + 1) whose curved sections overlap
over a length l, the bending coupling stores an energy -c3 l cos(psi_i -
psi_i+1) with c3 = EI_i EI_i+1 kappa_i kappa_i+1 / (EI_i + EI_i+1).

Torque balance on every tube, written in compliance form so that a tube
without a straight shaft is simply torsionally rigid:

    R_i(psi) = (psi_i - alpha_i) + (Ls_i / GJ_i) * sum_j c3_ij l_ij sin(psi_i - psi_j) = 0

The system is solved with a bounded Newton iteration seeded at psi = alpha.
"""

import logging

import jax
import jax.numpy as jnp
import numpy as np

from ..core.config import CURVED
from ..core.options import SolverOptions
from ..core.robot_model import ConcentricTubeRobot
from ..errors import InvalidConfigurationError, TorsionSolveDivergenceError

Array = jax.Array

logger = logging.getLogger(__name__)


def pair_coupling(robot: ConcentricTubeRobot, segment_lengths: Array, status: Array) -> Array:
    """Bending coupling c3 * l of each adjacent tube pair.

    Args:
        robot: Tube set
        segment_lengths: (2n,) segment lengths
        status: (2n, n) overlap status matrix

    Returns:
        (n - 1,) coupling torque amplitude of pairs (0, 1), (1, 2), ...
    """
    M = robot.bending_stiffness
    k = robot.precurvature
    status = jnp.asarray(status)

    combined = M[:-1] + M[1:]
    c3 = jnp.where(
        combined > 0.0,
        M[:-1] * M[1:] * k[:-1] * k[1:] / jnp.where(combined > 0.0, combined, 1.0),
        0.0,
    )

    both_curved = (status[:, :-1] == CURVED) & (status[:, 1:] == CURVED)
    overlap = jnp.sum(jnp.asarray(segment_lengths)[:, None] * both_curved, axis=0)
    return c3 * overlap


def torsional_compliance(robot: ConcentricTubeRobot) -> Array:
    """Twist per unit torque Ls / (G J) of each straight shaft; 0 for a rigid tube."""
    Ls = np.asarray(robot.straight_length)
    GJ = np.asarray(robot.torsional_rigidity)

    limp = (Ls > 0.0) & (GJ <= 0.0)
    if np.any(limp):
        names = [robot.tube_names[i] for i in np.flatnonzero(limp)]
        raise InvalidConfigurationError(
            f"Tubes {names} have a straight section but no torsional rigidity"
        )
    return jnp.asarray(np.where(Ls > 0.0, Ls / np.where(GJ > 0.0, GJ, 1.0), 0.0))


def torque_residual(psi: Array, alpha: Array, compliance: Array, coupling: Array) -> Array:
    """Torque-balance residual R(psi), expressed as an angle."""
    w = coupling * jnp.sin(psi[:-1] - psi[1:])
    torque = jnp.zeros_like(psi).at[:-1].add(w).at[1:].add(-w)
    return (psi - alpha) + compliance * torque


@jax.jit
def _newton_solve(alpha, compliance, coupling, tolerance, max_iterations):
    def residual(psi):
        return torque_residual(psi, alpha, compliance, coupling)

    def cond(state):
        _, iteration, error = state
        return (error > tolerance) & (iteration < max_iterations)

    def body(state):
        psi, iteration, _ = state
        step = jnp.linalg.solve(jax.jacfwd(residual)(psi), residual(psi))
        psi = psi - step
        return psi, iteration + 1, jnp.max(jnp.abs(residual(psi)))

    init = (alpha, jnp.asarray(0), jnp.max(jnp.abs(residual(alpha))))
    return jax.lax.while_loop(cond, body, init)


def solve_delivered_rotations(
    robot: ConcentricTubeRobot,
    alpha: Array,
    segment_lengths: Array,
    status: Array,
    options: SolverOptions = SolverOptions(),
) -> Array:
    """Solve the coupled torque balance for the delivered rotations.

    Args:
        robot: Tube set
        alpha: (n,) commanded base rotations [rad]
        segment_lengths: (2n,) segment lengths for the current translations
        status: (2n, n) overlap status matrix for the current translations
        options: Iteration budget and tolerance

    Returns:
        (n,) rotation delivered to each tube's curved section [rad]

    Raises:
        TorsionSolveDivergenceError: if the tolerance is not met within
            ``options.max_iterations`` Newton steps or an iterate is not finite.
    """
    alpha = jnp.asarray(alpha, dtype=jnp.float64)
    compliance = torsional_compliance(robot)
    coupling = pair_coupling(robot, segment_lengths, status)

    psi, iterations, error = _newton_solve(
        alpha, compliance, coupling, options.tolerance, options.max_iterations
    )
    iterations = int(iterations)
    error = float(error)
    logger.debug("Torsion solve: %d iterations, residual %.3e", iterations, error)

    if not np.isfinite(error) or not np.all(np.isfinite(np.asarray(psi))):
        raise TorsionSolveDivergenceError(
            f"Torsion solve produced a non-finite iterate after {iterations} iterations",
            iterations=iterations,
            residual=error,
        )
    if error > options.tolerance:
        raise TorsionSolveDivergenceError(
            f"Torsion solve did not converge in {iterations} iterations "
            f"(residual {error:.3e} > tolerance {options.tolerance:.1e})",
            iterations=iterations,
            residual=error,
        )

    logger.info("Delivered rotations with torsion (deg): %s", np.round(np.rad2deg(np.asarray(psi)), 4).tolist())
    return psi
