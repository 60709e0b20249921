"""Collaborator interfaces and adapters around the session core.

Upstream sensor feeds are reduced to the common Sample shape here; results
leave the core through a JumpSink.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from jumpmeter.core.config import IngestSettings
from jumpmeter.core.logging import get_logger
from jumpmeter.core.types import JumpEvent, JumpMetrics, RawReading, Sample, SessionSummary
from jumpmeter.signal.filters import NoiseFloorFilter

logger = get_logger(__name__)

SampleCallback = Callable[[Sample], object]


class SampleSource(ABC):
    """Push interface delivering samples to one subscriber."""

    gravity_included: bool = True

    @abstractmethod
    def subscribe(self, callback: SampleCallback) -> None:
        """Start delivering samples to callback."""

    @abstractmethod
    def unsubscribe(self) -> None:
        """Stop delivering samples."""


class JumpSink(ABC):
    """Receives jumps as they are detected and the final session summary."""

    @abstractmethod
    def on_jump(self, event: JumpEvent, metrics: JumpMetrics) -> None:
        """Called for every emitted jump."""

    @abstractmethod
    def on_summary(self, summary: SessionSummary) -> None:
        """Called once when a capture is finalized."""


class SampleAdapter:
    """Converts upstream readings into Samples.

    Missing axes are read as 0. Readings with non-finite values are dropped
    and counted. When denoising is enabled the NoiseFloorFilter is applied.
    """

    def __init__(
        self,
        settings: IngestSettings | None = None,
        gravity_included: bool | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            settings: Ingestion settings (uses defaults if None)
            gravity_included: Override settings.gravity_included for this feed
        """
        self.settings = settings or IngestSettings()
        self.gravity_included = (
            self.settings.gravity_included if gravity_included is None else gravity_included
        )
        self._noise_floor = NoiseFloorFilter(self.settings) if self.settings.denoise else None
        self.dropped_count = 0

    def to_sample(self, reading: RawReading) -> Sample | None:
        """Adapt one reading.

        Returns:
            Sample, or None if the reading was dropped
        """
        vector = (reading.x or 0.0, reading.y or 0.0, reading.z or 0.0)

        if not all(math.isfinite(v) for v in (reading.t, *vector)):
            self.dropped_count += 1
            logger.debug("Dropped malformed reading at t=%s", reading.t)
            return None

        if self._noise_floor is not None:
            vector = self._noise_floor.apply(vector)

        return Sample(t=reading.t, ax=vector[0], ay=vector[1], az=vector[2])


def including_gravity_adapter(settings: IngestSettings | None = None) -> SampleAdapter:
    """Adapter for accelerometer feeds that report acceleration including gravity."""
    return SampleAdapter(settings, gravity_included=True)


def linear_acceleration_adapter(settings: IngestSettings | None = None) -> SampleAdapter:
    """Adapter for linear-acceleration feeds with gravity already removed."""
    return SampleAdapter(settings, gravity_included=False)


class ReplaySource(SampleSource):
    """Replays recorded readings through an adapter to the subscriber."""

    def __init__(
        self,
        readings: Iterable[RawReading],
        adapter: SampleAdapter | None = None,
    ) -> None:
        self._readings = list(readings)
        self.adapter = adapter or including_gravity_adapter()
        self.gravity_included = self.adapter.gravity_included
        self._callback: SampleCallback | None = None

    @classmethod
    def from_samples(cls, samples: Iterable[Sample], gravity_included: bool = True) -> ReplaySource:
        """Replay already-adapted samples unchanged (no denoising)."""
        readings = (RawReading(t=s.t, x=s.ax, y=s.ay, z=s.az) for s in samples)
        adapter = SampleAdapter(IngestSettings(denoise=False), gravity_included=gravity_included)
        return cls(readings, adapter)

    @property
    def is_subscribed(self) -> bool:
        return self._callback is not None

    def subscribe(self, callback: SampleCallback) -> None:
        self._callback = callback

    def unsubscribe(self) -> None:
        self._callback = None

    def run(self) -> int:
        """Push all readings to the subscriber.

        Stops early if the subscriber unsubscribes.

        Returns:
            Number of samples delivered
        """
        delivered = 0
        for reading in self._readings:
            if self._callback is None:
                break
            sample = self.adapter.to_sample(reading)
            if sample is None:
                continue
            self._callback(sample)
            delivered += 1
        return delivered


class CollectingSink(JumpSink):
    """Keeps everything it receives, in arrival order."""

    def __init__(self) -> None:
        self.jumps: list[tuple[JumpEvent, JumpMetrics]] = []
        self.summaries: list[SessionSummary] = []

    def on_jump(self, event: JumpEvent, metrics: JumpMetrics) -> None:
        self.jumps.append((event, metrics))

    def on_summary(self, summary: SessionSummary) -> None:
        self.summaries.append(summary)


class LoggingSink(JumpSink):
    """Logs jumps and summaries."""

    def on_jump(self, event: JumpEvent, metrics: JumpMetrics) -> None:
        logger.info(
            "Jump: %.1f cm, flight %.3f s, contact %.3f s, RSI %.2f",
            metrics.height * 100,
            metrics.flight_time,
            metrics.contact_time,
            metrics.rsi,
        )

    def on_summary(self, summary: SessionSummary) -> None:
        logger.info(
            "Session: %d jumps over %.1f s (%.1f jumps/min)",
            summary.count,
            summary.duration,
            summary.cadence,
        )
