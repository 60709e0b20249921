"""Tests for sample adapters, sources and sinks."""

from __future__ import annotations

import logging

import pytest

from jumpmeter.analysis.metrics import compute_metrics, summarize
from jumpmeter.core.config import IngestSettings
from jumpmeter.core.types import JumpEvent, RawReading, Sample
from jumpmeter.pipeline.adapters import (
    CollectingSink,
    LoggingSink,
    ReplaySource,
    SampleAdapter,
    including_gravity_adapter,
    linear_acceleration_adapter,
)


class TestSampleAdapter:
    """Tests for reading-to-sample adaptation."""

    def test_missing_axes_read_as_zero(self, ingest_settings: IngestSettings) -> None:
        adapter = SampleAdapter(ingest_settings)

        sample = adapter.to_sample(RawReading(t=0.5, y=9.81))

        assert sample == Sample(t=0.5, ax=0.0, ay=9.81, az=0.0)

    @pytest.mark.parametrize(
        "reading",
        [
            RawReading(t=0.5, x=float("nan"), y=9.81, z=0.0),
            RawReading(t=0.5, x=0.0, y=float("inf"), z=0.0),
            RawReading(t=float("nan"), x=0.0, y=9.81, z=0.0),
        ],
    )
    def test_non_finite_reading_dropped(
        self, ingest_settings: IngestSettings, reading: RawReading
    ) -> None:
        adapter = SampleAdapter(ingest_settings)

        assert adapter.to_sample(reading) is None
        assert adapter.dropped_count == 1

    def test_noise_floor_applied(self, ingest_settings: IngestSettings) -> None:
        adapter = SampleAdapter(ingest_settings)

        sample = adapter.to_sample(RawReading(t=0.0, x=0.05, y=9.81, z=2.0))

        assert sample is not None
        assert sample.vector == (0.0, 9.81, 2.0)

    def test_denoise_disabled(self) -> None:
        adapter = SampleAdapter(IngestSettings(denoise=False))

        sample = adapter.to_sample(RawReading(t=0.0, x=0.05, y=1.0, z=-0.02))

        assert sample is not None
        assert sample.vector == (0.05, 1.0, -0.02)

    def test_gravity_flag_defaults_to_settings(self) -> None:
        adapter = SampleAdapter(IngestSettings(gravity_included=False))
        assert adapter.gravity_included is False

    def test_factories_set_gravity_flag(self, ingest_settings: IngestSettings) -> None:
        assert including_gravity_adapter(ingest_settings).gravity_included is True
        assert linear_acceleration_adapter(ingest_settings).gravity_included is False


class TestReplaySource:
    """Tests for the replay sample source."""

    def test_delivers_all_samples_in_order(self, jump_stream: list[Sample]) -> None:
        source = ReplaySource.from_samples(jump_stream)
        received: list[Sample] = []

        source.subscribe(received.append)
        delivered = source.run()

        assert delivered == len(jump_stream)
        assert received == jump_stream

    def test_no_delivery_without_subscriber(self, jump_stream: list[Sample]) -> None:
        source = ReplaySource.from_samples(jump_stream)

        assert source.run() == 0

    def test_stops_when_subscriber_unsubscribes(self, jump_stream: list[Sample]) -> None:
        source = ReplaySource.from_samples(jump_stream)
        received: list[Sample] = []

        def on_sample(sample: Sample) -> None:
            received.append(sample)
            if len(received) == 3:
                source.unsubscribe()

        source.subscribe(on_sample)

        assert source.run() == 3
        assert not source.is_subscribed

    def test_dropped_readings_not_delivered(self, ingest_settings: IngestSettings) -> None:
        readings = [
            RawReading(t=0.0, x=0.0, y=9.81, z=0.0),
            RawReading(t=0.01, x=float("nan"), y=9.81, z=0.0),
            RawReading(t=0.02, x=0.0, y=9.81, z=0.0),
        ]
        adapter = SampleAdapter(ingest_settings)
        source = ReplaySource(readings, adapter)
        received: list[Sample] = []
        source.subscribe(received.append)

        assert source.run() == 2
        assert [s.t for s in received] == [0.0, 0.02]
        assert adapter.dropped_count == 1

    def test_gravity_flag_follows_adapter(self) -> None:
        source = ReplaySource([], linear_acceleration_adapter())
        assert source.gravity_included is False
        assert ReplaySource.from_samples([], gravity_included=False).gravity_included is False


class TestSinks:
    """Tests for the bundled sinks."""

    def test_collecting_sink(self, sample_jump_event: JumpEvent) -> None:
        sink = CollectingSink()
        metrics = compute_metrics(sample_jump_event)
        summary = summarize([sample_jump_event])

        sink.on_jump(sample_jump_event, metrics)
        sink.on_summary(summary)

        assert sink.jumps == [(sample_jump_event, metrics)]
        assert sink.summaries == [summary]

    def test_logging_sink(
        self, sample_jump_event: JumpEvent, caplog: pytest.LogCaptureFixture
    ) -> None:
        sink = LoggingSink()

        with caplog.at_level(logging.INFO, logger="jumpmeter"):
            sink.on_jump(sample_jump_event, compute_metrics(sample_jump_event))
            sink.on_summary(summarize([sample_jump_event]))

        assert "11.0 cm" in caplog.text
        assert "1 jumps" in caplog.text
