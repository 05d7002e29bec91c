"""Shared tube sets for the test suite."""

from pathlib import Path

import pytest

from ctr_kinematics.core import ConcentricTubeRobot, Tube

FIXTURES = Path(__file__).parent / "fixtures"


def make_inner(**overrides):
    params = dict(
        outer_diameter=1.0, inner_diameter=0.8, precurvature=0.01,
        straight_length=100.0, curved_length=50.0, youngs_modulus=50e3, name="inner",
    )
    params.update(overrides)
    return Tube.create(**params)


def make_outer(**overrides):
    params = dict(
        outer_diameter=1.4, inner_diameter=1.1, precurvature=0.01,
        straight_length=60.0, curved_length=40.0, youngs_modulus=50e3, name="outer",
    )
    params.update(overrides)
    return Tube.create(**params)


@pytest.fixture
def single_tube_robot():
    return ConcentricTubeRobot.from_tubes([make_inner()])


@pytest.fixture
def two_tube_robot():
    return ConcentricTubeRobot.from_tubes([make_inner(), make_outer()])


@pytest.fixture
def fixtures_dir():
    return FIXTURES
