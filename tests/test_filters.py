"""Tests for vector helpers and signal filtering."""

from __future__ import annotations

import pytest

from jumpmeter.core.config import IngestSettings
from jumpmeter.core.types import FilterState
from jumpmeter.signal.filters import ExponentialSmoother, NoiseFloorFilter, SignalFilter
from jumpmeter.signal.vector import add, dot, norm, scale


class TestVectorMath:
    """Tests for 3-vector helpers."""

    def test_dot(self) -> None:
        assert dot((1.0, 2.0, 3.0), (4.0, -5.0, 6.0)) == pytest.approx(12.0)

    def test_norm(self) -> None:
        assert norm((3.0, 4.0, 12.0)) == pytest.approx(13.0)
        assert norm((0.0, 0.0, 0.0)) == 0.0

    def test_scale_and_add(self) -> None:
        assert scale((1.0, -2.0, 0.5), 2.0) == (2.0, -4.0, 1.0)
        assert add((1.0, 2.0, 3.0), (0.5, -2.0, 1.0)) == (1.5, 0.0, 4.0)


class TestExponentialSmoother:
    """Tests for the single-channel EMA."""

    def test_update_weights_newest_by_alpha(self) -> None:
        smoother = ExponentialSmoother(alpha=0.2)

        assert smoother.update(10.0) == pytest.approx(2.0)
        assert smoother.update(10.0) == pytest.approx(3.6)

    def test_starts_from_initial_value(self) -> None:
        smoother = ExponentialSmoother(alpha=0.5, initial=9.81)

        assert smoother.value == 9.81
        assert smoother.update(9.81) == pytest.approx(9.81)

    def test_alpha_one_tracks_input(self) -> None:
        smoother = ExponentialSmoother(alpha=1.0)
        assert smoother.update(3.0) == 3.0
        assert smoother.update(-1.0) == -1.0

    def test_converges_to_constant_input(self) -> None:
        smoother = ExponentialSmoother(alpha=0.2)
        for _ in range(200):
            smoother.update(5.0)

        assert smoother.value == pytest.approx(5.0)

    def test_reset(self) -> None:
        smoother = ExponentialSmoother(alpha=0.2, initial=1.0)
        smoother.update(100.0)
        smoother.reset()

        assert smoother.value == 1.0

    @pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
    def test_invalid_alpha(self, alpha: float) -> None:
        with pytest.raises(ValueError):
            ExponentialSmoother(alpha=alpha)


class TestSignalFilter:
    """Tests for the dual-channel filter."""

    def test_initial_state_is_at_rest(self) -> None:
        """Vertical starts at 0 and total at g0."""
        signal_filter = SignalFilter(alpha=0.2, g0=9.81)

        assert signal_filter.state == FilterState(ema_vertical=0.0, ema_total=9.81)

    def test_update_smooths_both_channels(self) -> None:
        signal_filter = SignalFilter(alpha=0.2, g0=10.0)
        state = signal_filter.update(a_vert=5.0, a_tot=15.0)

        assert state.ema_vertical == pytest.approx(1.0)
        assert state.ema_total == pytest.approx(11.0)

    def test_state_is_a_snapshot(self) -> None:
        signal_filter = SignalFilter(alpha=0.2, g0=10.0)
        before = signal_filter.state
        signal_filter.update(a_vert=5.0, a_tot=15.0)

        assert before.ema_vertical == 0.0

    def test_reset(self) -> None:
        signal_filter = SignalFilter(alpha=0.2, g0=10.0)
        signal_filter.update(a_vert=5.0, a_tot=15.0)
        signal_filter.reset()

        assert signal_filter.state == FilterState(ema_vertical=0.0, ema_total=10.0)


class TestNoiseFloorFilter:
    """Tests for the ingestion dead band."""

    def test_zeroes_small_components(self, ingest_settings: IngestSettings) -> None:
        noise_floor = NoiseFloorFilter(ingest_settings)

        assert noise_floor.apply((0.05, 9.81, -0.09)) == (0.0, 9.81, 0.0)

    def test_keeps_large_components(self, ingest_settings: IngestSettings) -> None:
        noise_floor = NoiseFloorFilter(ingest_settings)

        assert noise_floor.apply((0.5, 9.81, -2.0)) == (0.5, 9.81, -2.0)

    def test_gravity_axis_uses_larger_floor(self, ingest_settings: IngestSettings) -> None:
        """A y reading of 2.5 is dropped, the same reading on x is kept."""
        noise_floor = NoiseFloorFilter(ingest_settings)

        assert noise_floor.apply((2.5, 2.5, 0.0)) == (2.5, 0.0, 0.0)
        assert noise_floor.floor_for(1) == 3.0
        assert noise_floor.floor_for(0) == 0.1

    def test_gravity_axis_is_configurable(self) -> None:
        noise_floor = NoiseFloorFilter(IngestSettings(gravity_axis="z", gravity_axis_floor=2.0))

        assert noise_floor.apply((0.0, 1.5, 1.5)) == (0.0, 1.5, 0.0)
