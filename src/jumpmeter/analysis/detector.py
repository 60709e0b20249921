"""Jump phase state machine.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from collections.abc import Iterable

from jumpmeter.core.config import CalibrationSettings, DetectorSettings
from jumpmeter.core.logging import get_logger
from jumpmeter.core.types import (
    CalibrationResult,
    FilterState,
    JumpEvent,
    Phase,
    PhaseState,
    Sample,
    SignalTrace,
)
from jumpmeter.signal.calibration import Calibrator
from jumpmeter.signal.filters import SignalFilter
from jumpmeter.signal.vector import add, dot, norm, scale

logger = get_logger(__name__)


class PhaseStateMachine:
    """Classifies acceleration samples into ground, contact and flight phases.

    Transitions:
        GROUND -> CONTACT: Smoothed vertical acceleration exceeds move_thresh
        GROUND/CONTACT -> FLIGHT: Smoothed total stays near g0 and vertical near 0
        FLIGHT -> GROUND: Flight signature lost; candidate jump validated

    Samples that arrive with a non-increasing timestamp, or with non-finite
    values, are rejected without touching filter or phase state.
    """

    def __init__(
        self,
        calibration: CalibrationResult,
        settings: DetectorSettings | None = None,
        gravity_included: bool = True,
    ) -> None:
        """Initialize state machine.

        Args:
            calibration: Gravity estimate for the session
            settings: Detection thresholds (uses defaults if None)
            gravity_included: False if samples already have gravity removed
        """
        self.settings = settings or DetectorSettings()
        self.calibration = calibration
        self.gravity_included = gravity_included

        self._filter = SignalFilter(self.settings.alpha, calibration.g0)
        self._state = PhaseState.ground()
        self._last_t: float | None = None
        self._last_trace: SignalTrace | None = None
        self.rejected_count = 0

    @property
    def phase(self) -> Phase:
        """Current phase."""
        return self._state.phase

    @property
    def state(self) -> PhaseState:
        """Current phase with its timing markers."""
        return self._state

    @property
    def filter_state(self) -> FilterState:
        """Snapshot of the smoothed channels."""
        return self._filter.state

    @property
    def last_trace(self) -> SignalTrace | None:
        """Diagnostics of the most recently accepted sample."""
        return self._last_trace

    def reset(self) -> None:
        """Reset filter, phase and counters to capture-start values."""
        self._filter.reset()
        self._state = PhaseState.ground()
        self._last_t = None
        self._last_trace = None
        self.rejected_count = 0

    def cancel(self) -> PhaseState:
        """Drop any pending contact/flight phase without emitting.

        Returns:
            The phase state that was discarded
        """
        discarded = self._state
        if discarded.is_pending:
            logger.debug("Discarding pending %s phase", discarded.phase.name)
        self._state = PhaseState.ground()
        return discarded

    def step(self, sample: Sample) -> JumpEvent | None:
        """Process one sample.

        Args:
            sample: Next sample in arrival order

        Returns:
            JumpEvent if this sample completed a valid jump, None otherwise
        """
        if not sample.is_finite:
            self.rejected_count += 1
            logger.debug("Rejected non-finite sample at t=%s", sample.t)
            return None
        if self._last_t is not None and sample.t <= self._last_t:
            self.rejected_count += 1
            logger.debug("Rejected out-of-order sample t=%.4f (last %.4f)", sample.t, self._last_t)
            return None
        self._last_t = sample.t

        a_vert, a_tot = self._project(sample)
        smoothed = self._filter.update(a_vert, a_tot)

        g0 = self.calibration.g0
        is_flight = (
            abs(smoothed.ema_total - g0) < self.settings.flight_eps_mag
            and abs(smoothed.ema_vertical) < self.settings.flight_eps_vert
        )
        has_motion = abs(smoothed.ema_vertical) > self.settings.move_thresh

        self._last_trace = SignalTrace(
            t=sample.t,
            a_vert_raw=a_vert,
            a_vert=smoothed.ema_vertical,
            a_tot_raw=a_tot,
            a_tot=smoothed.ema_total,
            is_flight=is_flight,
            has_motion=has_motion,
        )

        if self._state.phase is Phase.FLIGHT:
            return self._handle_flight(sample.t, is_flight)
        self._handle_supported(sample.t, is_flight, has_motion)
        return None

    def _project(self, sample: Sample) -> tuple[float, float]:
        """Vertical (gravity removed) and total (gravity included) acceleration."""
        vector = sample.vector
        g0 = self.calibration.g0
        g_unit = self.calibration.g_unit

        if self.gravity_included:
            return dot(vector, g_unit) - g0, norm(vector)

        # Gravity-free source: put gravity back only for the magnitude channel
        return dot(vector, g_unit), norm(add(vector, scale(g_unit, g0)))

    def _handle_supported(self, t: float, is_flight: bool, has_motion: bool) -> None:
        """Handle GROUND/CONTACT - watch for contact motion and takeoff."""
        if is_flight:
            t_contact_start = self._state.t_contact_start
            if t_contact_start is None:
                t_contact_start = max(0.0, t - self.settings.contact_fallback)
            self._state = PhaseState.flight(t_takeoff=t, t_contact_start=t_contact_start)
            return

        if has_motion and self._state.phase is not Phase.CONTACT:
            self._state = PhaseState.contact(t)

    def _handle_flight(self, t: float, is_flight: bool) -> JumpEvent | None:
        """Handle FLIGHT - detect landing and validate the candidate."""
        if is_flight:
            return None

        pending = self._state
        self._state = PhaseState.ground()

        # Both markers are set on entering FLIGHT
        candidate = JumpEvent(
            t_contact_start=pending.t_contact_start,  # type: ignore[arg-type]
            t_takeoff=pending.t_takeoff,  # type: ignore[arg-type]
            t_landing=t,
        )

        if not self._is_valid(candidate):
            return None

        logger.debug(
            "Jump: contact %.3f, takeoff %.3f, landing %.3f",
            candidate.t_contact_start,
            candidate.t_takeoff,
            candidate.t_landing,
        )
        return candidate

    def _is_valid(self, candidate: JumpEvent) -> bool:
        flight = candidate.t_landing - candidate.t_takeoff
        contact = candidate.t_takeoff - candidate.t_contact_start

        # Durations must be positive even when the configured minimums are 0
        flight_ok = flight > 0 and self.settings.min_flight <= flight <= self.settings.max_flight
        contact_ok = contact > 0 and contact >= self.settings.min_contact

        if not (flight_ok and contact_ok):
            logger.debug(
                "Discarded candidate: flight %.3f s, contact %.3f s",
                flight,
                contact,
            )
        return flight_ok and contact_ok


def detect_jumps_batch(
    samples: Iterable[Sample],
    settings: DetectorSettings | None = None,
    calibration_settings: CalibrationSettings | None = None,
) -> list[JumpEvent]:
    """Detect all jumps in a recorded capture.

    The leading window of the recording is used for calibration, the rest
    is run through a fresh PhaseStateMachine. A phase still pending at the
    end of the recording is discarded.

    Args:
        samples: Recorded samples in arrival order
        settings: Detection thresholds
        calibration_settings: Calibration window settings

    Returns:
        List of detected jump events

    Raises:
        CalibrationError: If the leading window does not calibrate
    """
    calibrator = Calibrator(calibration_settings)
    machine: PhaseStateMachine | None = None
    events: list[JumpEvent] = []

    for sample in samples:
        if machine is None:
            result = calibrator.feed(sample)
            if result is None:
                continue
            machine = PhaseStateMachine(result, settings)

        event = machine.step(sample)
        if event is not None:
            events.append(event)

    if machine is None and calibrator.sample_count:
        # Recording shorter than the calibration window: calibrate but no jumps
        calibrator.finish()

    return events
