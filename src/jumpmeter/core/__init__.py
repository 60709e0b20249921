"""Core infrastructure: config, types, exceptions, and logging."""

from jumpmeter.core.config import Settings, get_profile, get_settings
from jumpmeter.core.exceptions import (
    CalibrationError,
    ConfigurationError,
    ImplausibleGravityError,
    InsufficientCalibrationSamplesError,
    InvalidInputError,
    InvalidTimingError,
    JumpMeterError,
    MetricsError,
    SessionStateError,
)
from jumpmeter.core.logging import get_logger, setup_logging
from jumpmeter.core.types import (
    CalibrationResult,
    FilterState,
    JumpEvent,
    JumpMetrics,
    Phase,
    PhaseState,
    RawReading,
    Sample,
    SessionSummary,
    SignalTrace,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_profile",
    # Types
    "Sample",
    "RawReading",
    "CalibrationResult",
    "FilterState",
    "Phase",
    "PhaseState",
    "JumpEvent",
    "JumpMetrics",
    "SessionSummary",
    "SignalTrace",
    # Exceptions
    "JumpMeterError",
    "ConfigurationError",
    "CalibrationError",
    "InsufficientCalibrationSamplesError",
    "ImplausibleGravityError",
    "MetricsError",
    "InvalidTimingError",
    "InvalidInputError",
    "SessionStateError",
    # Logging
    "setup_logging",
    "get_logger",
]
