"""Jump metrics and session summaries.

Flight-time based metrics: flight time, ballistic height, contact time and
Reactive Strength Index. Everything except export_summary is pure.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from jumpmeter.core.exceptions import InvalidInputError, InvalidTimingError
from jumpmeter.core.types import JumpEvent, JumpMetrics, SessionSummary

STANDARD_GRAVITY = 9.80665  # m/s^2


def flight_time(event: JumpEvent) -> float:
    """Airborne duration, landing minus takeoff.

    Raises:
        InvalidTimingError: If landing is not after takeoff
    """
    tf = event.t_landing - event.t_takeoff
    if not tf > 0:
        raise InvalidTimingError(f"Flight time must be positive, got {tf:.4f} s")
    return tf


def jump_height(flight_s: float, g: float = STANDARD_GRAVITY) -> float:
    """Ballistic height estimate h = g * t^2 / 8.

    Assumes takeoff and landing happen at the same body height.

    Args:
        flight_s: Flight time in seconds
        g: Gravitational acceleration (m/s^2)

    Returns:
        Jump height in meters

    Raises:
        InvalidInputError: If flight_s is not positive
    """
    if not flight_s > 0:
        raise InvalidInputError(f"Flight time must be positive, got {flight_s}")
    return g * flight_s * flight_s / 8.0


def contact_time(event: JumpEvent) -> float:
    """Ground contact duration before takeoff.

    Raises:
        InvalidTimingError: If takeoff is not after contact start
    """
    tc = event.t_takeoff - event.t_contact_start
    if not tc > 0:
        raise InvalidTimingError(f"Contact time must be positive, got {tc:.4f} s")
    return tc


def rsi(height_m: float, contact_s: float) -> float:
    """Reactive Strength Index, height over contact time (m/s).

    Raises:
        InvalidInputError: If height is negative or contact time not positive
    """
    if not height_m >= 0:
        raise InvalidInputError(f"Height must be non-negative, got {height_m}")
    if not contact_s > 0:
        raise InvalidInputError(f"Contact time must be positive, got {contact_s}")
    return height_m / contact_s


def compute_metrics(event: JumpEvent, g: float = STANDARD_GRAVITY) -> JumpMetrics:
    """Derive all per-jump metrics from one event."""
    tf = flight_time(event)
    h = jump_height(tf, g)
    tc = contact_time(event)
    return JumpMetrics(flight_time=tf, height=h, contact_time=tc, rsi=rsi(h, tc))


def summarize(events: Sequence[JumpEvent], g: float = STANDARD_GRAVITY) -> SessionSummary:
    """Summarize a series of jumps.

    Duration spans the earliest contact start to the latest landing;
    cadence is jumps per minute over that span.

    Args:
        events: Jump events in detection order
        g: Gravitational acceleration (m/s^2)

    Returns:
        SessionSummary (all zeros for an empty series)
    """
    items = tuple(compute_metrics(event, g) for event in events)
    count = len(items)

    duration = 0.0
    if count:
        start = min(e.t_contact_start for e in events)
        end = max(e.t_landing for e in events)
        duration = max(0.0, end - start)

    cadence = count / (duration / 60.0) if duration > 0 else 0.0

    return SessionSummary(
        items=items,
        count=count,
        duration=duration,
        cadence=cadence,
        events=tuple(events),
    )


def export_summary(summary: SessionSummary, path: Path) -> None:
    """Export a session summary to a JSON file.

    Args:
        summary: Summary to export
        path: Output file path
    """
    jumps_data = [
        {
            "t_contact_start": event.t_contact_start,
            "t_takeoff": event.t_takeoff,
            "t_landing": event.t_landing,
            "flight_time_s": metrics.flight_time,
            "height_m": metrics.height,
            "contact_time_s": metrics.contact_time,
            "rsi": metrics.rsi,
        }
        for event, metrics in zip(summary.events, summary.items)
    ]

    data = {
        "count": summary.count,
        "duration_s": summary.duration,
        "cadence_per_min": summary.cadence,
        "best_height_m": summary.best_height,
        "mean_height_m": summary.mean_height,
        "best_rsi": summary.best_rsi,
        "jumps": jumps_data,
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
