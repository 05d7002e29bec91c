"""Exception hierarchy for concentric tube robot kinematics."""


class CTRError(Exception):
    """Base class for all errors raised by ctr_kinematics."""


class InvalidConfigurationError(CTRError, ValueError):
    """Raised when tubes, joint values or solver options are rejected before computation."""


class SegmentationContractError(CTRError, RuntimeError):
    """Raised when a segmenter returns lengths or status codes that break the overlap contract."""


class TorsionSolveDivergenceError(CTRError, RuntimeError):
    """Raised when the torsional equilibrium solve does not meet its tolerance.

    Attributes:
        iterations: Number of Newton iterations performed
        residual: Infinity norm of the last equilibrium residual
    """

    def __init__(self, message: str, iterations: int, residual: float):
        super().__init__(message)
        self.iterations = iterations
        self.residual = residual
