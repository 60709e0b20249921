"""Core data types and structures."""

import math
from dataclasses import dataclass, field
from enum import Enum, auto

Vector3 = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class Sample:
    """A single acceleration sample.

    Attributes:
        t: Timestamp in seconds (monotonic within a capture)
        ax: Acceleration along the sensor x axis (m/s^2)
        ay: Acceleration along the sensor y axis (m/s^2)
        az: Acceleration along the sensor z axis (m/s^2)
    """

    t: float
    ax: float
    ay: float
    az: float

    @property
    def vector(self) -> Vector3:
        """Acceleration as a 3-vector."""
        return (self.ax, self.ay, self.az)

    @property
    def is_finite(self) -> bool:
        """True if timestamp and all axes are finite numbers."""
        return all(math.isfinite(v) for v in (self.t, self.ax, self.ay, self.az))


@dataclass(frozen=True, slots=True)
class RawReading:
    """An upstream motion reading before adaptation.

    Sensor callbacks may leave individual axes unset, so each axis is optional.
    """

    t: float
    x: float | None = None
    y: float | None = None
    z: float | None = None


@dataclass(frozen=True, slots=True)
class CalibrationResult:
    """Gravity estimate from an at-rest calibration window.

    Attributes:
        g0: Gravity magnitude (m/s^2)
        g_unit: Unit vector pointing along measured gravity in sensor frame
        sample_count: Number of samples averaged
    """

    g0: float
    g_unit: Vector3
    sample_count: int


@dataclass(slots=True)
class FilterState:
    """Smoothed vertical and total acceleration channels."""

    ema_vertical: float = 0.0
    ema_total: float = 0.0


class Phase(Enum):
    """States in the jump phase state machine."""

    GROUND = auto()
    CONTACT = auto()
    FLIGHT = auto()


@dataclass(frozen=True, slots=True)
class PhaseState:
    """Current phase plus the timing markers it carries."""

    phase: Phase = Phase.GROUND
    t_contact_start: float | None = None
    t_takeoff: float | None = None

    @classmethod
    def ground(cls) -> "PhaseState":
        return cls()

    @classmethod
    def contact(cls, t_contact_start: float) -> "PhaseState":
        return cls(Phase.CONTACT, t_contact_start=t_contact_start)

    @classmethod
    def flight(cls, t_takeoff: float, t_contact_start: float) -> "PhaseState":
        return cls(Phase.FLIGHT, t_contact_start=t_contact_start, t_takeoff=t_takeoff)

    @property
    def is_pending(self) -> bool:
        """True while a contact or flight phase is unconfirmed."""
        return self.phase is not Phase.GROUND


@dataclass(frozen=True, slots=True)
class JumpEvent:
    """A contact -> takeoff -> landing cycle.

    Attributes:
        t_contact_start: Start of ground contact preceding takeoff (s)
        t_takeoff: Takeoff timestamp (s)
        t_landing: Landing timestamp (s)
    """

    t_contact_start: float
    t_takeoff: float
    t_landing: float


@dataclass(frozen=True, slots=True)
class JumpMetrics:
    """Metrics derived from a single jump event.

    Attributes:
        flight_time: Airborne duration (s)
        height: Ballistic jump height estimate (m)
        contact_time: Ground contact duration before takeoff (s)
        rsi: Reactive Strength Index, height / contact_time (m/s)
    """

    flight_time: float
    height: float
    contact_time: float
    rsi: float


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Aggregated results of one capture session.

    Attributes:
        items: Per-jump metrics in detection order
        count: Number of jumps
        duration: Seconds from first contact start to last landing
        cadence: Jumps per minute over the duration
        events: The jump events the metrics were computed from
    """

    items: tuple[JumpMetrics, ...] = ()
    count: int = 0
    duration: float = 0.0
    cadence: float = 0.0
    events: tuple[JumpEvent, ...] = field(default=())

    @property
    def best_height(self) -> float | None:
        """Highest jump in meters."""
        if not self.items:
            return None
        return max(m.height for m in self.items)

    @property
    def mean_height(self) -> float | None:
        """Average jump height in meters."""
        if not self.items:
            return None
        return sum(m.height for m in self.items) / len(self.items)

    @property
    def best_rsi(self) -> float | None:
        """Highest Reactive Strength Index."""
        if not self.items:
            return None
        return max(m.rsi for m in self.items)


@dataclass(frozen=True, slots=True)
class SignalTrace:
    """Diagnostics for the most recently classified sample."""

    t: float
    a_vert_raw: float
    a_vert: float
    a_tot_raw: float
    a_tot: float
    is_flight: bool
    has_motion: bool
