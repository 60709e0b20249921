"""Signal filtering: EMA smoothing and ingestion noise floor."""

from __future__ import annotations

from jumpmeter.core.config import IngestSettings
from jumpmeter.core.types import FilterState, Vector3

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


class ExponentialSmoother:
    """Single-channel exponential moving average.

    value <- alpha * x + (1 - alpha) * value
    """

    def __init__(self, alpha: float = 0.2, initial: float = 0.0) -> None:
        """Initialize smoother.

        Args:
            alpha: Weight of the newest sample (0, 1]; higher reacts faster
            initial: Starting smoothed value
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._initial = initial
        self.value = initial

    def reset(self, initial: float | None = None) -> None:
        """Reset smoothed value to its initial (or a new) starting point."""
        if initial is not None:
            self._initial = initial
        self.value = self._initial

    def update(self, x: float) -> float:
        """Add a sample and return the smoothed value."""
        self.value = self.alpha * x + (1.0 - self.alpha) * self.value
        return self.value


class SignalFilter:
    """EMA smoothing of the vertical and total acceleration channels.

    Vertical starts at 0 (no dynamic acceleration) and total starts at the
    calibrated gravity magnitude, i.e. the values of a device at rest.
    """

    def __init__(self, alpha: float, g0: float) -> None:
        self._vertical = ExponentialSmoother(alpha, initial=0.0)
        self._total = ExponentialSmoother(alpha, initial=g0)

    @property
    def state(self) -> FilterState:
        """Snapshot of the smoothed channels."""
        return FilterState(ema_vertical=self._vertical.value, ema_total=self._total.value)

    def reset(self) -> None:
        self._vertical.reset()
        self._total.reset()

    def update(self, a_vert: float, a_tot: float) -> FilterState:
        """Smooth one vertical/total pair.

        Args:
            a_vert: Gravity-removed vertical acceleration (m/s^2)
            a_tot: Total acceleration magnitude including gravity (m/s^2)

        Returns:
            Updated filter state
        """
        self._vertical.update(a_vert)
        self._total.update(a_tot)
        return self.state


class NoiseFloorFilter:
    """Component-wise dead band applied before samples reach the detector.

    Any axis reading whose magnitude is below the floor is zeroed. The axis
    aligned with gravity uses its own, larger floor.
    """

    def __init__(self, settings: IngestSettings | None = None) -> None:
        """Initialize noise floor.

        Args:
            settings: Ingestion settings (uses defaults if None)
        """
        self.settings = settings or IngestSettings()
        self._gravity_index = _AXIS_INDEX[self.settings.gravity_axis]

    def floor_for(self, axis: int) -> float:
        """Dead-band threshold for an axis index (0=x, 1=y, 2=z)."""
        if axis == self._gravity_index:
            return self.settings.gravity_axis_floor
        return self.settings.noise_floor

    def apply(self, vector: Vector3) -> Vector3:
        """Zero every component below its floor.

        Args:
            vector: Raw (x, y, z) reading

        Returns:
            Denoised reading
        """
        x, y, z = (
            0.0 if abs(value) < self.floor_for(axis) else value
            for axis, value in enumerate(vector)
        )
        return (x, y, z)
