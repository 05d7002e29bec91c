"""Tube and ConcentricTubeRobot PyTree data structures.

Tubes are immutable once created. A robot stores the properties of all its
tubes as stacked JAX arrays so that the mechanics kernels can vectorise over
tubes and stay compatible with JAX transformations.
"""

import math
from typing import Optional, Sequence, Tuple

import jax
import jax.numpy as jnp
import numpy as np
from flax import struct

from ..errors import InvalidConfigurationError
from .config import DEFAULT_POISSON_RATIO

Array = jax.Array


def second_moment_of_area(outer_diameter, inner_diameter):
    """Second moment of area of an annular cross section, I = pi/64 (OD^4 - ID^4)."""
    return math.pi / 64.0 * (outer_diameter**4 - inner_diameter**4)


@struct.dataclass
class Tube:
    """A single pre-curved tube: a straight shaft followed by a circular arc.

    Attributes:
        outer_diameter: Outer diameter, same length unit as the joint translations.
        inner_diameter: Inner diameter (0 for a solid wire).
        precurvature: Curvature of the curved section when unconstrained [rad/length].
        straight_length: Length of the straight section (Ls).
        curved_length: Length of the pre-curved section (Lc).
        youngs_modulus: Young's modulus E.
        shear_modulus: Shear modulus G.
        name: Label used in logs and tube-set files. Static field.
    """
    outer_diameter: float
    inner_diameter: float
    precurvature: float
    straight_length: float
    curved_length: float
    youngs_modulus: float
    shear_modulus: float
    name: str = struct.field(pytree_node=False, default="tube")

    @classmethod
    def create(
        cls,
        outer_diameter: float,
        inner_diameter: float,
        precurvature: float,
        straight_length: float,
        curved_length: float,
        youngs_modulus: float,
        shear_modulus: Optional[float] = None,
        poisson_ratio: float = DEFAULT_POISSON_RATIO,
        name: str = "tube",
    ) -> "Tube":
        """Validate properties and build a Tube.

        When ``shear_modulus`` is omitted it is derived from the Young's modulus
        as G = E / (2 (1 + nu)).
        """
        if shear_modulus is None:
            if not -1.0 < poisson_ratio <= 0.5:
                raise InvalidConfigurationError(
                    f"Tube '{name}': poisson_ratio must lie in (-1, 0.5], got {poisson_ratio}"
                )
            shear_modulus = youngs_modulus / (2.0 * (1.0 + poisson_ratio))

        values = {
            "outer_diameter": outer_diameter,
            "inner_diameter": inner_diameter,
            "precurvature": precurvature,
            "straight_length": straight_length,
            "curved_length": curved_length,
            "youngs_modulus": youngs_modulus,
            "shear_modulus": shear_modulus,
        }
        for key, value in values.items():
            value = float(value)
            if not math.isfinite(value):
                raise InvalidConfigurationError(f"Tube '{name}': {key} must be finite, got {value}")
            if value < 0.0:
                raise InvalidConfigurationError(f"Tube '{name}': {key} must be non-negative, got {value}")
            values[key] = value

        if values["outer_diameter"] <= values["inner_diameter"]:
            raise InvalidConfigurationError(
                f"Tube '{name}': outer_diameter ({values['outer_diameter']}) must exceed "
                f"inner_diameter ({values['inner_diameter']})"
            )

        return cls(name=name, **values)

    @property
    def second_moment(self) -> float:
        return second_moment_of_area(self.outer_diameter, self.inner_diameter)

    @property
    def polar_moment(self) -> float:
        return 2.0 * self.second_moment

    @property
    def bending_stiffness(self) -> float:
        return self.youngs_modulus * self.second_moment

    @property
    def torsional_rigidity(self) -> float:
        return self.shear_modulus * self.polar_moment

    @property
    def length(self) -> float:
        return self.straight_length + self.curved_length


@struct.dataclass
class ConcentricTubeRobot:
    """Immutable PyTree representation of a set of nested tubes.

    Index 0 is the innermost tube. Every array field has shape (num_tubes,).

    Attributes:
        tube_names: Tuple of tube names. Marked static for JIT compilation.
        outer_diameter: Outer diameters.
        inner_diameter: Inner diameters.
        precurvature: Pre-curvatures of the curved sections.
        straight_length: Straight section lengths.
        curved_length: Curved section lengths.
        youngs_modulus: Young's moduli.
        shear_modulus: Shear moduli.
    """
    tube_names: Tuple[str, ...] = struct.field(pytree_node=False)
    outer_diameter: Array
    inner_diameter: Array
    precurvature: Array
    straight_length: Array
    curved_length: Array
    youngs_modulus: Array
    shear_modulus: Array

    @classmethod
    def from_tubes(cls, tubes: Sequence[Tube], check_order: bool = True) -> "ConcentricTubeRobot":
        """Stack tubes, innermost first, into a robot.

        Args:
            tubes: Tubes ordered from innermost to outermost.
            check_order: Require strictly increasing outer diameters.

        Returns:
            ConcentricTubeRobot
        """
        tubes = list(tubes)
        if not tubes:
            raise InvalidConfigurationError("A concentric tube robot needs at least one tube")

        if check_order:
            diameters = np.array([t.outer_diameter for t in tubes])
            if np.any(np.diff(diameters) <= 0):
                raise InvalidConfigurationError(
                    "Tubes must be ordered innermost first with strictly increasing outer "
                    f"diameters, got {diameters.tolist()}"
                )

        def stack(field):
            return jnp.array([getattr(t, field) for t in tubes], dtype=jnp.float64)

        return cls(
            tube_names=tuple(t.name for t in tubes),
            outer_diameter=stack("outer_diameter"),
            inner_diameter=stack("inner_diameter"),
            precurvature=stack("precurvature"),
            straight_length=stack("straight_length"),
            curved_length=stack("curved_length"),
            youngs_modulus=stack("youngs_modulus"),
            shear_modulus=stack("shear_modulus"),
        )

    def tube(self, index: int) -> Tube:
        """Rebuild the Tube at ``index``."""
        return Tube(
            outer_diameter=float(self.outer_diameter[index]),
            inner_diameter=float(self.inner_diameter[index]),
            precurvature=float(self.precurvature[index]),
            straight_length=float(self.straight_length[index]),
            curved_length=float(self.curved_length[index]),
            youngs_modulus=float(self.youngs_modulus[index]),
            shear_modulus=float(self.shear_modulus[index]),
            name=self.tube_names[index],
        )

    @property
    def num_tubes(self) -> int:
        return len(self.tube_names)

    @property
    def num_segments(self) -> int:
        return 2 * len(self.tube_names)

    @property
    def second_moment(self) -> Array:
        return second_moment_of_area(self.outer_diameter, self.inner_diameter)

    @property
    def bending_stiffness(self) -> Array:
        return self.youngs_modulus * self.second_moment

    @property
    def torsional_rigidity(self) -> Array:
        # J = 2I for a circular annulus
        return self.shear_modulus * 2.0 * self.second_moment

    @property
    def total_length(self) -> Array:
        return self.straight_length + self.curved_length
