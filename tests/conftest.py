"""Pytest fixtures for jumpmeter tests."""

from __future__ import annotations

import pytest

from jumpmeter.core.config import (
    CalibrationSettings,
    DetectorSettings,
    IngestSettings,
    Settings,
)
from jumpmeter.core.types import CalibrationResult, JumpEvent, Sample

GRAVITY = 9.81
RATE_HZ = 200

# Segment lengths in samples at RATE_HZ
REST_SAMPLES = 201  # t = 0.000 .. 1.000, exactly the calibration window
PUSH_SAMPLES = 60  # 0.3 s of upward push before takeoff
FLIGHT_SAMPLES = 60  # 0.3 s airborne
LANDING_SAMPLES = 60  # 0.3 s of landing impact
SETTLE_SAMPLES = 100  # 0.5 s standing after the jump


def make_samples(segments: list[tuple[int, float]], start_index: int = 0) -> list[Sample]:
    """Build a stream from (sample count, vertical acceleration) segments.

    Gravity points along +y. The vertical value is added on top of gravity.
    """
    samples = []
    index = start_index
    for count, vertical in segments:
        for _ in range(count):
            samples.append(Sample(t=index / RATE_HZ, ax=0.0, ay=GRAVITY + vertical, az=0.0))
            index += 1
    return samples


def jump_segments() -> list[tuple[int, float]]:
    """Rest, push, flight, landing, settle."""
    return [
        (REST_SAMPLES, 0.0),
        (PUSH_SAMPLES, 4.0),
        (FLIGHT_SAMPLES, 0.0),
        (LANDING_SAMPLES, 10.0),
        (SETTLE_SAMPLES, 0.0),
    ]


@pytest.fixture
def jump_stream() -> list[Sample]:
    """1 s at rest, then one push/flight/landing cycle, then standing.

    With default thresholds the push is detected as contact at t=1.010,
    takeoff lags the start of flight by the EMA decay (t=1.350) and landing
    is detected on the first impact sample (t=1.605).
    """
    return make_samples(jump_segments())


@pytest.fixture
def rest_stream() -> list[Sample]:
    """Device held still for 2 s."""
    return make_samples([(2 * RATE_HZ, 0.0)])


@pytest.fixture
def gravity_calibration() -> CalibrationResult:
    """Calibration for a device with gravity along +y."""
    return CalibrationResult(g0=GRAVITY, g_unit=(0.0, 1.0, 0.0), sample_count=REST_SAMPLES)


@pytest.fixture
def detector_settings() -> DetectorSettings:
    """Standard detection thresholds."""
    return DetectorSettings(
        alpha=0.2,
        flight_eps_mag=0.5,
        flight_eps_vert=0.6,
        move_thresh=1.2,
        min_flight=0.10,
        max_flight=1.20,
        min_contact=0.08,
        contact_fallback=0.20,
    )


@pytest.fixture
def calibration_settings() -> CalibrationSettings:
    """1 s calibration window."""
    return CalibrationSettings(window_ms=1000.0, min_samples=10, min_gravity=5.0, max_gravity=15.0)


@pytest.fixture
def ingest_settings() -> IngestSettings:
    """Default ingestion settings, gravity along y."""
    return IngestSettings(
        denoise=True,
        noise_floor=0.1,
        gravity_axis="y",
        gravity_axis_floor=3.0,
        gravity_included=True,
    )


@pytest.fixture
def settings(
    detector_settings: DetectorSettings,
    calibration_settings: CalibrationSettings,
    ingest_settings: IngestSettings,
) -> Settings:
    """Application settings independent of the environment."""
    return Settings(
        detector=detector_settings,
        calibration=calibration_settings,
        ingest=ingest_settings,
    )


@pytest.fixture
def sample_jump_event() -> JumpEvent:
    """Jump with 0.2 s contact and 0.3 s flight."""
    return JumpEvent(t_contact_start=0.0, t_takeoff=0.2, t_landing=0.5)
