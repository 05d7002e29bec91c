"""Tests for the forward kinematics driver."""

import jax.numpy as jnp
import numpy as np
import pytest

from ctr_kinematics import (
    ComplianceMode,
    ConcentricTubeRobot,
    InvalidConfigurationError,
    KinematicsResult,
    SegmentationContractError,
    SolverOptions,
    TorsionSolveDivergenceError,
    forward_kinematics,
)
from ctr_kinematics.core import ABSENT
from ctr_kinematics.io import load_robot
from ctr_kinematics.mechanics import segment

from conftest import make_inner, make_outer


def test_fk_single_tube(single_tube_robot):
    """A lone tube is straight, then bends with its own curvature in its own plane."""
    q = jnp.array([[150.0, 0.3]])
    result = forward_kinematics(single_tube_robot, q)

    assert isinstance(result, KinematicsResult)
    np.testing.assert_allclose(result.curvatures, [0.0, 0.01])
    np.testing.assert_allclose(result.bend_angles[1], 0.3, rtol=1e-12)
    np.testing.assert_allclose(result.tube_arcs(0), [[0.0, 0.0, 100.0], [0.01, 0.3, 50.0]], atol=1e-15)

    # straight 100 along z, then a 0.5 rad arc in the plane rotated by 0.3
    r = (1.0 - np.cos(0.5)) / 0.01
    expected = [r * np.cos(0.3), r * np.sin(0.3), 100.0 + np.sin(0.5) / 0.01]
    np.testing.assert_allclose(result.tip_pose(0)[:3, 3], expected, rtol=1e-9)


def test_fk_shapes(two_tube_robot):
    q = jnp.array([[120.0, 0.0], [80.0, 1.0]])
    result = forward_kinematics(two_tube_robot, q)

    assert result.segment_lengths.shape == (4,)
    assert result.status.shape == (4, 2)
    assert result.delivered_rotations.shape == (2,)
    assert result.curvatures.shape == (4,)
    assert result.bend_angles.shape == (4,)
    assert result.arcs.shape == (2, 4, 3)
    assert len(result.chains) == 2
    for chain in result.chains:
        assert chain.shape == (5, 4, 4)
    assert result.mode is ComplianceMode.RIGID
    assert jnp.all(jnp.isfinite(result.arcs))


def test_rigid_mode_delivers_commanded_rotation(two_tube_robot):
    q = np.array([[120.0, -0.7], [80.0, 2.1]])
    result = forward_kinematics(two_tube_robot, q, ComplianceMode.RIGID)
    np.testing.assert_array_equal(result.delivered_rotations, q[:, 1])


def test_compliant_mode_changes_delivered_rotation(two_tube_robot):
    q = np.array([[120.0, 0.0], [80.0, 1.0]])
    rigid = forward_kinematics(two_tube_robot, q)
    compliant = forward_kinematics(two_tube_robot, q, "torsionally_compliant")

    assert compliant.mode is ComplianceMode.TORSIONALLY_COMPLIANT
    assert not np.allclose(compliant.delivered_rotations, q[:, 1])
    # only the segments where both tubes bend feel the coupling
    np.testing.assert_allclose(compliant.segment_lengths, rigid.segment_lengths)
    assert not np.isclose(compliant.bend_angles[2], rigid.bend_angles[2])


def test_compliant_mode_with_aligned_tubes_matches_rigid(two_tube_robot):
    q = np.array([[120.0, 0.6], [80.0, 0.6]])
    rigid = forward_kinematics(two_tube_robot, q)
    compliant = forward_kinematics(two_tube_robot, q, ComplianceMode.TORSIONALLY_COMPLIANT)
    np.testing.assert_array_equal(compliant.arcs, rigid.arcs)


def test_compliant_divergence_is_reported(two_tube_robot):
    """The rigid result is never substituted for a failed torsion solve."""
    q = np.array([[120.0, 0.0], [80.0, 2.5]])
    with pytest.raises(TorsionSolveDivergenceError):
        forward_kinematics(
            two_tube_robot, q, ComplianceMode.TORSIONALLY_COMPLIANT,
            options=SolverOptions(max_iterations=1, tolerance=1e-15),
        )


def test_length_conservation_fully_inserted(two_tube_robot):
    """A fully inserted tube's arcs add up to its whole length."""
    q = jnp.array([[150.0, 0.2], [100.0, -0.4]])
    result = forward_kinematics(two_tube_robot, q)

    np.testing.assert_allclose(jnp.sum(result.arcs[0, :, 2]), 150.0, rtol=1e-12)
    np.testing.assert_allclose(jnp.sum(result.arcs[1, :, 2]), 100.0, rtol=1e-12)


def test_arc_lengths_match_insertion(two_tube_robot):
    q = jnp.array([[120.0, 0.0], [80.0, 1.0]])
    result = forward_kinematics(two_tube_robot, q)
    np.testing.assert_allclose(jnp.sum(result.arcs[:, :, 2], axis=1), [120.0, 80.0], rtol=1e-12)


def test_absent_arcs_are_zeroed(two_tube_robot):
    q = jnp.array([[120.0, 0.0], [80.0, 1.0]])
    result = forward_kinematics(two_tube_robot, q)

    absent = np.asarray(result.status.T == ABSENT)
    assert absent.any()
    assert np.all(np.asarray(result.arcs[..., 0])[absent] == 0.0)
    assert np.all(np.asarray(result.arcs[..., 2])[absent] == 0.0)


def test_inner_tube_follows_outer_tube(two_tube_robot):
    """Both tubes share the backbone frames while the outer tube is present."""
    q = jnp.array([[120.0, 0.0], [80.0, 1.0]])
    result = forward_kinematics(two_tube_robot, q)
    np.testing.assert_allclose(result.chains[0][:4], result.chains[1][:4], atol=1e-10)


def test_three_tube_robot(fixtures_dir):
    robot = load_robot(str(fixtures_dir / "three_tube.xml"))
    q = jnp.array([[230.0, 0.0], [150.0, 2.0], [100.0, -1.0]])

    for mode in ComplianceMode:
        result = forward_kinematics(robot, q, mode)
        assert result.arcs.shape == (3, 6, 3)
        assert jnp.all(jnp.isfinite(result.arcs))
        np.testing.assert_allclose(jnp.sum(result.arcs[:, :, 2], axis=1), [230.0, 150.0, 100.0], rtol=1e-12)


def test_per_tube_integrators(two_tube_robot):
    seen = []

    def record(arcs):
        seen.append(arcs.shape)
        return jnp.sum(arcs[:, 2])

    result = forward_kinematics(two_tube_robot, jnp.array([[120.0, 0.0], [80.0, 1.0]]), integrator=[record, record])
    assert seen == [(4, 3), (4, 3)]
    np.testing.assert_allclose(result.chains, [120.0, 80.0])
    with pytest.raises(TypeError):
        result.tip_pose(0)


def test_integrator_count_must_match(two_tube_robot):
    with pytest.raises(InvalidConfigurationError, match="chain integrators"):
        forward_kinematics(two_tube_robot, jnp.array([[120.0, 0.0], [80.0, 1.0]]), integrator=[lambda a: a])


def test_invalid_joint_shape(two_tube_robot):
    with pytest.raises(InvalidConfigurationError, match="shape"):
        forward_kinematics(two_tube_robot, jnp.array([[120.0, 0.0]]))
    with pytest.raises(InvalidConfigurationError, match="shape"):
        forward_kinematics(two_tube_robot, jnp.array([120.0, 80.0]))


def test_invalid_translations(two_tube_robot):
    with pytest.raises(InvalidConfigurationError, match="non-negative"):
        forward_kinematics(two_tube_robot, jnp.array([[-1.0, 0.0], [80.0, 0.0]]))
    with pytest.raises(InvalidConfigurationError, match="exceeds"):
        forward_kinematics(two_tube_robot, jnp.array([[120.0, 0.0], [101.0, 0.0]]))
    with pytest.raises(InvalidConfigurationError, match="finite"):
        forward_kinematics(two_tube_robot, np.array([[120.0, np.nan], [80.0, 0.0]]))


def test_unknown_mode(two_tube_robot):
    with pytest.raises(InvalidConfigurationError, match="compliance mode"):
        forward_kinematics(two_tube_robot, jnp.array([[120.0, 0.0], [80.0, 1.0]]), "floppy")


def test_segmenter_contract_violation_is_fatal(two_tube_robot):
    def broken_segmenter(robot, translations):
        lengths, status = segment(robot, translations)
        return lengths, status.at[0, 1].set(ABSENT)

    q = jnp.array([[120.0, 0.0], [80.0, 1.0]])
    with pytest.raises(SegmentationContractError):
        forward_kinematics(two_tube_robot, q, segmenter=broken_segmenter)


def test_evaluation_is_pure(two_tube_robot):
    """The robot is untouched and repeated calls agree."""
    before = jnp.array(two_tube_robot.precurvature)
    q1 = jnp.array([[120.0, 0.0], [80.0, 1.0]])
    q2 = jnp.array([[60.0, 1.0], [90.0, -1.0]])

    first = forward_kinematics(two_tube_robot, q1)
    forward_kinematics(two_tube_robot, q2)
    again = forward_kinematics(two_tube_robot, q1)

    np.testing.assert_array_equal(first.arcs, again.arcs)
    np.testing.assert_array_equal(two_tube_robot.precurvature, before)


def test_unordered_tubes_rejected():
    with pytest.raises(InvalidConfigurationError, match="innermost first"):
        ConcentricTubeRobot.from_tubes([make_outer(), make_inner()])
    robot = ConcentricTubeRobot.from_tubes([make_outer(), make_inner()], check_order=False)
    assert robot.tube_names == ("outer", "inner")
