"""Capture session orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field

from jumpmeter.analysis.detector import PhaseStateMachine
from jumpmeter.analysis.metrics import compute_metrics, summarize
from jumpmeter.core.config import Settings, get_settings
from jumpmeter.core.exceptions import CalibrationError, SessionStateError
from jumpmeter.core.logging import get_logger
from jumpmeter.core.types import CalibrationResult, JumpEvent, Phase, Sample, SessionSummary
from jumpmeter.pipeline.adapters import JumpSink, SampleSource
from jumpmeter.signal.calibration import Calibrator

logger = get_logger(__name__)


@dataclass
class _Session:
    """Everything one capture owns. Replaced as a whole on reset."""

    calibrator: Calibrator
    machine: PhaseStateMachine | None = None
    events: list[JumpEvent] = field(default_factory=list)
    summary: SessionSummary | None = None


class SessionAggregator:
    """Orchestrates calibration, phase detection and metrics for a capture.

    Coordinates:
    - At-rest gravity calibration on the leading window
    - Per-sample phase detection
    - Per-jump metrics and the final session summary

    Samples arrive through feed(), either called directly or pushed by the
    injected SampleSource after start().
    """

    def __init__(
        self,
        source: SampleSource | None = None,
        sink: JumpSink | None = None,
        settings: Settings | None = None,
        calibration: CalibrationResult | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            source: Sample feed (optional when feeding samples directly)
            sink: Receiver for jumps and summaries
            settings: Application settings (uses defaults if None)
            calibration: Fixed gravity estimate; skips the calibration window.
                Required for sources that deliver gravity-free samples.
        """
        self.settings = settings or get_settings()
        self.source = source
        self.sink = sink
        self._preset_calibration = calibration
        self._session: _Session | None = None

        if source is not None:
            self.gravity_included = source.gravity_included
        else:
            self.gravity_included = self.settings.ingest.gravity_included

    @property
    def calibration(self) -> CalibrationResult | None:
        """Gravity estimate in use, once available."""
        if self._session is None or self._session.machine is None:
            return None
        return self._session.machine.calibration

    @property
    def is_calibrated(self) -> bool:
        return self.calibration is not None

    @property
    def phase(self) -> Phase:
        """Current phase (GROUND until calibrated)."""
        if self._session is None or self._session.machine is None:
            return Phase.GROUND
        return self._session.machine.phase

    @property
    def events(self) -> tuple[JumpEvent, ...]:
        """Jumps emitted so far in this session."""
        if self._session is None:
            return ()
        return tuple(self._session.events)

    @property
    def rejected_count(self) -> int:
        """Samples rejected as out-of-order or malformed."""
        if self._session is None:
            return 0
        count = self._session.calibrator.rejected_count
        if self._session.machine is not None:
            count += self._session.machine.rejected_count
        return count

    @property
    def is_finalized(self) -> bool:
        return self._session is not None and self._session.summary is not None

    def reset(self, calibration: CalibrationResult | None = None) -> None:
        """Start a fresh session, replacing all previous session state.

        Args:
            calibration: Fixed gravity estimate for this and later sessions

        Raises:
            CalibrationError: If the source is gravity-free and no
                calibration is available
        """
        if calibration is not None:
            self._preset_calibration = calibration
        preset = self._preset_calibration

        if preset is None and not self.gravity_included:
            raise CalibrationError(
                "Gravity-free sample source requires an explicit calibration result"
            )

        session = _Session(calibrator=Calibrator(self.settings.calibration))
        if preset is not None:
            session.machine = self._build_machine(preset)

        self._session = session
        logger.info("Session reset (calibration %s)", "preset" if preset else "pending")

    def feed(self, sample: Sample) -> JumpEvent | None:
        """Process one incoming sample.

        Args:
            sample: Next sample in arrival order

        Returns:
            JumpEvent if the sample completed a jump, None otherwise

        Raises:
            CalibrationError: If the calibration window failed
            SessionStateError: If no session is active
        """
        session = self._active_session()

        if session.machine is None:
            result = session.calibrator.feed(sample)
            if result is None:
                return None
            session.machine = self._build_machine(result)

        event = session.machine.step(sample)
        if event is None:
            return None

        metrics = compute_metrics(event, self.settings.metrics.gravity)
        session.events.append(event)
        logger.info(
            "Jump detected: %.1f cm, flight %.3f s (t=%.3f-%.3f)",
            metrics.height * 100,
            metrics.flight_time,
            event.t_takeoff,
            event.t_landing,
        )
        if self.sink is not None:
            self.sink.on_jump(event, metrics)
        return event

    def finalize(self) -> SessionSummary:
        """End the capture and summarize it.

        A contact or flight phase still pending is discarded. Calling this
        again returns the same summary.

        Returns:
            SessionSummary over all jumps of the session
        """
        session = self._session
        if session is None:
            raise SessionStateError("No active session, call reset() first")
        if session.summary is not None:
            return session.summary

        if session.machine is None:
            logger.warning(
                "Capture ended before calibration completed (%d samples)",
                session.calibrator.sample_count,
            )
        else:
            session.machine.cancel()

        session.summary = summarize(session.events, self.settings.metrics.gravity)
        logger.info(
            "Session finalized: %d jumps, %d rejected samples",
            session.summary.count,
            self.rejected_count,
        )
        if self.sink is not None:
            self.sink.on_summary(session.summary)
        return session.summary

    def start(self) -> None:
        """Reset and subscribe to the sample source."""
        if self.source is None:
            raise SessionStateError("No sample source configured")
        self.reset()
        self.source.subscribe(self.feed)

    def stop(self) -> SessionSummary:
        """Unsubscribe from the source and finalize the session."""
        if self.source is not None:
            self.source.unsubscribe()
        return self.finalize()

    def _active_session(self) -> _Session:
        if self._session is None:
            raise SessionStateError("No active session, call reset() first")
        if self._session.summary is not None:
            raise SessionStateError("Session already finalized, call reset() to start again")
        return self._session

    def _build_machine(self, calibration: CalibrationResult) -> PhaseStateMachine:
        return PhaseStateMachine(
            calibration,
            self.settings.detector,
            gravity_included=self.gravity_included,
        )

    def __enter__(self) -> SessionAggregator:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        if exc_type is None:
            self.stop()
        elif self.source is not None:
            self.source.unsubscribe()
