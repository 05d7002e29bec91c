"""Tube-set parser for loading robots from XML descriptions.

A tube set lists its tubes innermost first, URDF style::

    <robot name="two_tube">
      <tube name="inner" outer_diameter="1.2" inner_diameter="0.9"
            precurvature="0.01" straight_length="150" curved_length="50"
            youngs_modulus="5e4" poisson_ratio="0.4"/>
      <solver max_iterations="50" tolerance="1e-10"/>
    </robot>

``shear_modulus`` may replace ``poisson_ratio``; the ``<solver>`` element is
optional.
"""

import logging
from typing import Dict, List, Optional

from lxml import etree

from ..core.options import SolverOptions
from ..core.robot_model import ConcentricTubeRobot, Tube
from ..errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

_REQUIRED = (
    "outer_diameter",
    "inner_diameter",
    "precurvature",
    "straight_length",
    "curved_length",
    "youngs_modulus",
)
_OPTIONAL = ("shear_modulus", "poisson_ratio")


def _parse(path: str):
    try:
        return etree.parse(path).getroot()
    except (OSError, etree.XMLSyntaxError) as e:
        raise InvalidConfigurationError(f"Cannot read tube set '{path}': {e}") from e


def _number(elem, key: str, owner: str) -> Optional[float]:
    text = elem.get(key)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        raise InvalidConfigurationError(f"{owner}: attribute '{key}' is not a number: {text!r}")


def _tube_from_element(elem, index: int) -> Tube:
    name = elem.get("name", f"tube{index}")
    owner = f"Tube '{name}'"

    values: Dict[str, float] = {}
    for key in _REQUIRED:
        value = _number(elem, key, owner)
        if value is None:
            raise InvalidConfigurationError(f"{owner}: missing attribute '{key}'")
        values[key] = value

    for key in _OPTIONAL:
        value = _number(elem, key, owner)
        if value is not None:
            values[key] = value

    return Tube.create(name=name, **values)


def load_tubes(path: str) -> List[Tube]:
    """Load the tubes of a tube-set file in file order.

    Args:
        path: Path to the XML file.

    Returns:
        List of Tube, innermost first.
    """
    root = _parse(path)
    tubes = [_tube_from_element(elem, i) for i, elem in enumerate(root.findall(".//tube"))]
    if not tubes:
        raise InvalidConfigurationError(f"Tube set '{path}' contains no <tube> elements")
    return tubes


def load_robot(path: str, check_order: bool = True) -> ConcentricTubeRobot:
    """Load a tube-set file and convert it to a ConcentricTubeRobot PyTree.

    Args:
        path: Path to the XML file.
        check_order: Require strictly increasing outer diameters.

    Returns:
        ConcentricTubeRobot
    """
    tubes = load_tubes(path)
    logger.debug("Loaded %d tubes from %s: %s", len(tubes), path, [t.name for t in tubes])
    return ConcentricTubeRobot.from_tubes(tubes, check_order=check_order)


def load_solver_options(path: str) -> SolverOptions:
    """Read the optional <solver> element; defaults when it is absent."""
    root = _parse(path)
    elem = root.find(".//solver")
    if elem is None:
        return SolverOptions()

    kwargs = {}
    iterations = _number(elem, "max_iterations", "Solver")
    if iterations is not None:
        if not iterations.is_integer():
            raise InvalidConfigurationError(f"Solver: max_iterations must be an integer, got {iterations}")
        kwargs["max_iterations"] = int(iterations)
    tolerance = _number(elem, "tolerance", "Solver")
    if tolerance is not None:
        kwargs["tolerance"] = tolerance
    return SolverOptions(**kwargs)
