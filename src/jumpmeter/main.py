"""Replay a recorded acceleration capture and report detected jumps.

The recording is a CSV file with a header row and columns t, ax, ay, az.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

from jumpmeter.analysis.metrics import export_summary
from jumpmeter.core.config import THRESHOLD_PROFILES, Settings, get_profile, get_settings
from jumpmeter.core.exceptions import JumpMeterError
from jumpmeter.core.logging import get_logger, setup_logging
from jumpmeter.core.types import RawReading, SessionSummary, Vector3
from jumpmeter.pipeline.adapters import (
    LoggingSink,
    ReplaySource,
    including_gravity_adapter,
    linear_acceleration_adapter,
)
from jumpmeter.pipeline.session import SessionAggregator
from jumpmeter.signal.calibration import calibration_from_gravity

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("t", "ax", "ay", "az")


def load_recording(path: Path, timestamps_ms: bool = False) -> list[RawReading]:
    """Load a CSV recording.

    Args:
        path: CSV file with t, ax, ay, az columns
        timestamps_ms: True if t is in milliseconds

    Returns:
        Readings in file order

    Raises:
        ValueError: If required columns are missing
    """
    data = np.atleast_1d(np.genfromtxt(path, delimiter=",", names=True, dtype=np.float64))
    names = data.dtype.names or ()
    missing = [c for c in REQUIRED_COLUMNS if c not in names]
    if missing:
        raise ValueError(f"{path}: missing columns {', '.join(missing)}")

    t = data["t"] / 1000.0 if timestamps_ms else data["t"]
    return [
        RawReading(t=float(ti), x=float(x), y=float(y), z=float(z))
        for ti, x, y, z in zip(t, data["ax"], data["ay"], data["az"])
    ]


def replay(
    readings: list[RawReading],
    settings: Settings,
    gravity: Vector3 | None = None,
) -> SessionSummary:
    """Run readings through a full capture session.

    Args:
        readings: Recorded readings
        settings: Application settings
        gravity: Gravity vector for a gravity-free recording; None if the
            recording includes gravity and calibrates itself

    Returns:
        Session summary
    """
    calibration = None
    if gravity is None:
        adapter = including_gravity_adapter(settings.ingest)
    else:
        adapter = linear_acceleration_adapter(settings.ingest)
        calibration = calibration_from_gravity(gravity, settings.calibration)

    source = ReplaySource(readings, adapter)
    with SessionAggregator(source, LoggingSink(), settings, calibration) as session:
        delivered = source.run()
        logger.info("Replayed %d samples (%d dropped)", delivered, adapter.dropped_count)
    return session.finalize()


def print_summary(summary: SessionSummary) -> None:
    """Print a human-readable summary table."""
    print(f"Jumps: {summary.count}")
    print(f"Duration: {summary.duration:.2f} s")
    print(f"Cadence: {summary.cadence:.1f} jumps/min")
    for idx, m in enumerate(summary.items, start=1):
        print(
            f"  #{idx:<3d} flight {m.flight_time:.3f} s | height {m.height * 100:5.1f} cm"
            f" | contact {m.contact_time:.3f} s | RSI {m.rsi:.2f}"
        )


def main(argv: list[str] | None = None) -> int:
    """Run replay CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(description="Detect jumps in a recorded capture")
    parser.add_argument("recording", type=Path, help="CSV file with t, ax, ay, az columns")
    parser.add_argument(
        "--profile",
        choices=sorted(THRESHOLD_PROFILES),
        help="Detection threshold profile (default: JUMP_* settings)",
    )
    parser.add_argument(
        "--gravity",
        nargs=3,
        type=float,
        metavar=("GX", "GY", "GZ"),
        help="Gravity vector for a recording with gravity removed",
    )
    parser.add_argument(
        "--ms",
        action="store_true",
        help="Timestamps are in milliseconds",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write summary JSON to this path")
    parser.add_argument("--log-level", help="Override log level")
    parser.add_argument(
        "--trace",
        action="store_true",
        default=None,
        help="Log per-sample detector diagnostics",
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.profile is not None:
        settings = settings.model_copy(update={"detector": get_profile(args.profile)})
    setup_logging(settings.logging, level=args.log_level, trace=args.trace)

    try:
        readings = load_recording(args.recording, timestamps_ms=args.ms)
        gravity = tuple(args.gravity) if args.gravity else None
        summary = replay(readings, settings, gravity)
    except (OSError, ValueError) as e:
        logger.error("Could not read recording: %s", e)
        return 1
    except JumpMeterError as e:
        logger.error("Replay failed: %s", e)
        return 1

    print_summary(summary)

    if args.output is not None:
        export_summary(summary, args.output)
        logger.info("Summary written to %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
