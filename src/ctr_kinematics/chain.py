"""Forward kinematics of a concentric tube robot.

This module turns joint values into per-tube arc sequences: segment the
backbone into overlap regions, optionally correct the commanded rotations for
shaft torsion, superpose the tube curvatures in every segment, and hand each
tube's arcs to its chain integrator. Evaluation is a pure function of the
robot and the joint values; nothing is cached between calls.
"""

import logging
from typing import Any, Callable, Sequence, Tuple, Union

import jax
import jax.numpy as jnp
import numpy as np

from .core import ComplianceMode, ConcentricTubeRobot, KinematicsResult, SolverOptions
from .errors import InvalidConfigurationError
from .mechanics import (
    build_arcs,
    check_segmentation,
    segment,
    solve_delivered_rotations,
    superpose_segments,
)
from .transforms import integrate_arcs

Array = jax.Array
Segmenter = Callable[[ConcentricTubeRobot, Array], Tuple[Array, Array]]
Integrator = Callable[[Array], Any]

logger = logging.getLogger(__name__)


def validate_joint_config(robot: ConcentricTubeRobot, q) -> np.ndarray:
    """Check joint values against the robot before any computation.

    Args:
        robot: Tube set
        q: (n, 2) joint values, rows of (translation, rotation)

    Returns:
        q as a float64 numpy array

    Raises:
        InvalidConfigurationError: on a shape mismatch, non-finite values, a
            negative translation or a translation beyond the tube length.
    """
    try:
        q = np.asarray(q, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Joint values are not numeric: {e}") from e

    n = robot.num_tubes
    if q.shape != (n, 2):
        raise InvalidConfigurationError(
            f"Expected joint values of shape ({n}, 2) for {n} tubes, got {q.shape}"
        )
    if not np.all(np.isfinite(q)):
        raise InvalidConfigurationError("Joint values must be finite")

    translations = q[:, 0]
    lengths = np.asarray(robot.total_length)
    for i in range(n):
        if translations[i] < 0.0:
            raise InvalidConfigurationError(
                f"Tube '{robot.tube_names[i]}': translation must be non-negative, got {translations[i]}"
            )
        if translations[i] > lengths[i]:
            raise InvalidConfigurationError(
                f"Tube '{robot.tube_names[i]}': translation {translations[i]} exceeds tube length {lengths[i]}"
            )
    return q


def _integrators(integrator: Union[Integrator, Sequence[Integrator]], n: int) -> Tuple[Integrator, ...]:
    if callable(integrator):
        return (integrator,) * n
    integrators = tuple(integrator)
    if len(integrators) != n:
        raise InvalidConfigurationError(f"Expected {n} chain integrators, got {len(integrators)}")
    return integrators


def forward_kinematics(
    robot: ConcentricTubeRobot,
    q,
    mode: Union[ComplianceMode, str] = ComplianceMode.RIGID,
    *,
    segmenter: Segmenter = segment,
    integrator: Union[Integrator, Sequence[Integrator]] = integrate_arcs,
    options: SolverOptions = SolverOptions(),
) -> KinematicsResult:
    """Compute the arc sequence of every tube for one joint configuration.

    Args:
        robot: Tube set, innermost first
        q: (n, 2) joint values, rows of (translation, rotation [rad])
        mode: Rigid shafts (default) or torsionally compliant shafts
        segmenter: Backbone segmentation, ``segment`` by default
        integrator: Chain integrator for all tubes, or one per tube
        options: Iteration budget and tolerance of the torsion solve

    Returns:
        KinematicsResult holding segments, delivered rotations, arcs and the
        integrated chain of every tube

    Raises:
        InvalidConfigurationError: if the joint values are rejected
        SegmentationContractError: if the segmenter breaks its contract
        TorsionSolveDivergenceError: if the compliant solve does not converge
    """
    mode = ComplianceMode.parse(mode)
    q = validate_joint_config(robot, q)
    integrators = _integrators(integrator, robot.num_tubes)
    logger.debug("Forward kinematics of %d tubes, %s shafts", robot.num_tubes, mode.value)

    segment_lengths, status = segmenter(robot, jnp.asarray(q[:, 0]))
    segment_lengths, status = check_segmentation(segment_lengths, status, robot.num_tubes)

    alpha = jnp.asarray(q[:, 1])
    if mode is ComplianceMode.TORSIONALLY_COMPLIANT:
        psi = solve_delivered_rotations(robot, alpha, segment_lengths, status, options)
    else:
        psi = alpha

    curvatures, bend_angles = superpose_segments(
        robot.bending_stiffness, robot.precurvature, psi, status
    )
    arcs = build_arcs(segment_lengths, curvatures, bend_angles, status)
    chains = tuple(integrate(arcs[i]) for i, integrate in enumerate(integrators))

    return KinematicsResult(
        q=jnp.asarray(q),
        segment_lengths=jnp.asarray(segment_lengths),
        status=jnp.asarray(status),
        delivered_rotations=psi,
        curvatures=curvatures,
        bend_angles=bend_angles,
        arcs=arcs,
        chains=chains,
        mode=mode,
    )
