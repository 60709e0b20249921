"""Custom exceptions for jumpmeter."""


class JumpMeterError(Exception):
    """Base exception for all jumpmeter errors."""

    pass


class ConfigurationError(JumpMeterError):
    """Invalid or unknown configuration."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        self.message = message
        super().__init__(self.message)


class CalibrationError(JumpMeterError):
    """Calibration process failed or produced unusable gravity data."""

    def __init__(self, message: str = "Calibration failed") -> None:
        self.message = message
        super().__init__(self.message)


class InsufficientCalibrationSamplesError(CalibrationError):
    """Too few samples fell inside the calibration window."""

    def __init__(self, count: int, required: int) -> None:
        self.count = count
        self.required = required
        super().__init__(
            f"Insufficient calibration samples: got {count}, need at least {required}"
        )


class ImplausibleGravityError(CalibrationError):
    """Estimated gravity magnitude is outside the plausible range."""

    def __init__(self, g0: float, low: float, high: float) -> None:
        self.g0 = g0
        self.low = low
        self.high = high
        super().__init__(
            f"Implausible gravity estimate {g0:.3f} m/s^2 (expected {low}-{high}), "
            "hold the device still and recalibrate"
        )


class MetricsError(JumpMeterError):
    """Jump metrics could not be derived from the given inputs."""

    def __init__(self, message: str = "Metrics error") -> None:
        self.message = message
        super().__init__(self.message)


class InvalidTimingError(MetricsError):
    """A duration derived from event timestamps is not positive."""

    def __init__(self, message: str = "Invalid event timing") -> None:
        super().__init__(message)


class InvalidInputError(MetricsError):
    """A metric input is outside its valid range."""

    def __init__(self, message: str = "Invalid metric input") -> None:
        super().__init__(message)


class SessionStateError(JumpMeterError):
    """Session operation is not valid in the current session state."""

    def __init__(self, message: str = "Invalid session state") -> None:
        self.message = message
        super().__init__(self.message)
