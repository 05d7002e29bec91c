"""Evaluation options for forward kinematics."""

import enum
import math
from dataclasses import dataclass

from ..errors import InvalidConfigurationError
from .config import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE


class ComplianceMode(enum.Enum):
    """How the straight shafts transmit base rotation to the curved sections."""
    RIGID = "rigid"
    TORSIONALLY_COMPLIANT = "torsionally_compliant"

    @classmethod
    def parse(cls, mode) -> "ComplianceMode":
        if isinstance(mode, cls):
            return mode
        try:
            return cls(str(mode).lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise InvalidConfigurationError(f"Unknown compliance mode {mode!r}, expected one of: {choices}")


@dataclass(frozen=True)
class SolverOptions:
    """Iteration budget and tolerance for the torsional equilibrium solve.

    Attributes:
        max_iterations: Maximum number of Newton steps.
        tolerance: Convergence threshold on the infinity norm of the residual [rad].
    """
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE

    def __post_init__(self):
        if isinstance(self.max_iterations, bool) or int(self.max_iterations) != self.max_iterations:
            raise InvalidConfigurationError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        if self.max_iterations < 1:
            raise InvalidConfigurationError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if not (math.isfinite(self.tolerance) and self.tolerance > 0.0):
            raise InvalidConfigurationError(f"tolerance must be positive and finite, got {self.tolerance}")
