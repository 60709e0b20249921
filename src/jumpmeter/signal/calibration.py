"""At-rest gravity calibration.

Estimates the gravity magnitude and its direction in the sensor frame from
the leading window of a capture, while the device is held still.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from jumpmeter.core.config import CalibrationSettings
from jumpmeter.core.exceptions import (
    CalibrationError,
    ImplausibleGravityError,
    InsufficientCalibrationSamplesError,
)
from jumpmeter.core.logging import get_logger
from jumpmeter.core.types import CalibrationResult, Sample, Vector3
from jumpmeter.signal.vector import norm, scale

logger = get_logger(__name__)


def calibrate(
    samples: Sequence[Sample],
    window_s: float | None = None,
    settings: CalibrationSettings | None = None,
) -> CalibrationResult:
    """Estimate gravity from the leading at-rest window of a sample run.

    Samples whose offset from the first sample is at most ``window_s`` are
    averaged. Non-finite samples are ignored.

    Args:
        samples: Samples in arrival order
        window_s: Window length in seconds (defaults to settings.window_s)
        settings: Calibration settings (uses defaults if None)

    Returns:
        CalibrationResult with g0 and the gravity unit vector

    Raises:
        InsufficientCalibrationSamplesError: Fewer than min_samples in window
        ImplausibleGravityError: g0 outside [min_gravity, max_gravity]
    """
    settings = settings or CalibrationSettings()
    if window_s is None:
        window_s = settings.window_s

    window: list[Sample] = []
    if samples:
        t0 = samples[0].t
        window = [s for s in samples if s.t - t0 <= window_s and s.is_finite]

    if len(window) < settings.min_samples:
        raise InsufficientCalibrationSamplesError(len(window), settings.min_samples)

    mean = np.asarray([s.vector for s in window], dtype=np.float64).mean(axis=0)
    g0 = float(np.linalg.norm(mean))

    if not settings.min_gravity <= g0 <= settings.max_gravity:
        raise ImplausibleGravityError(g0, settings.min_gravity, settings.max_gravity)

    unit = mean / g0
    return CalibrationResult(
        g0=g0,
        g_unit=(float(unit[0]), float(unit[1]), float(unit[2])),
        sample_count=len(window),
    )


def calibration_from_gravity(
    gravity: Vector3,
    settings: CalibrationSettings | None = None,
) -> CalibrationResult:
    """Build a calibration from a gravity vector reported by a gravity sensor.

    Used for gravity-free feeds, which cannot be calibrated from their own
    samples.

    Raises:
        ImplausibleGravityError: If the vector's magnitude is implausible
    """
    settings = settings or CalibrationSettings()
    g0 = norm(gravity)
    if not settings.min_gravity <= g0 <= settings.max_gravity:
        raise ImplausibleGravityError(g0, settings.min_gravity, settings.max_gravity)
    return CalibrationResult(g0=g0, g_unit=scale(gravity, 1.0 / g0), sample_count=1)


class Calibrator:
    """Incremental calibration for live sessions.

    Buffers samples until one arrives beyond the window (measured on sample
    timestamps), then calibrates over the buffered window.
    """

    def __init__(self, settings: CalibrationSettings | None = None) -> None:
        """Initialize calibrator with settings.

        Args:
            settings: Calibration settings (uses defaults if None)
        """
        self.settings = settings or CalibrationSettings()
        self._buffer: list[Sample] = []
        self._result: CalibrationResult | None = None
        self._error: CalibrationError | None = None
        self.rejected_count = 0

    @property
    def result(self) -> CalibrationResult | None:
        """Calibration result, once the window has closed successfully."""
        return self._result

    @property
    def is_complete(self) -> bool:
        """Check if the calibration window has closed."""
        return self._result is not None or self._error is not None

    @property
    def sample_count(self) -> int:
        """Samples collected so far."""
        return len(self._buffer)

    def reset(self) -> None:
        """Discard buffered samples and any previous result."""
        self._buffer.clear()
        self._result = None
        self._error = None
        self.rejected_count = 0

    def feed(self, sample: Sample) -> CalibrationResult | None:
        """Add a sample to the calibration window.

        Args:
            sample: Next sample in arrival order

        Returns:
            CalibrationResult when this sample closes the window, else None.
            The closing sample itself is not part of the window.

        Raises:
            CalibrationError: If the window closed without a valid estimate,
                or on any feed after such a failure
        """
        if self._error is not None:
            raise self._error
        if self._result is not None:
            return self._result

        if not sample.is_finite or (self._buffer and sample.t <= self._buffer[-1].t):
            self.rejected_count += 1
            logger.debug("Calibration sample rejected at t=%s", sample.t)
            return None

        if self._buffer and sample.t - self._buffer[0].t > self.settings.window_s:
            return self._close()

        self._buffer.append(sample)
        return None

    def finish(self) -> CalibrationResult:
        """Close the window early using the samples collected so far.

        Raises:
            CalibrationError: If the buffered samples do not calibrate
        """
        if self._error is not None:
            raise self._error
        if self._result is not None:
            return self._result
        return self._close()

    def _close(self) -> CalibrationResult:
        try:
            self._result = calibrate(self._buffer, self.settings.window_s, self.settings)
        except CalibrationError as exc:
            self._error = exc
            logger.warning("Calibration failed: %s", exc)
            raise

        logger.info(
            "Calibrated: g0=%.3f m/s^2, g_unit=(%.3f, %.3f, %.3f) from %d samples",
            self._result.g0,
            *self._result.g_unit,
            self._result.sample_count,
        )
        return self._result
