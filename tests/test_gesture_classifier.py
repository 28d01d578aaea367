"""Tests for tap/hold classification and the gesture timer.

Verifies that:
- duration - 100ms is compared against threshold * 1000
- Exactly threshold + buffer counts as a hold
- No threshold means no classification
- Absent, future or stale press timestamps measure as 0ms
"""

import pytest

from ipkey.core.constants import HOLD_BUFFER_MS, MAX_PLAUSIBLE_PRESS_MS
from ipkey.core.gesture import GestureTimer, classify, monotonic_ms
from ipkey.core.model import GestureSettings, Verdict


class TestClassify:
    """Tests for the classify() boundary formula."""

    def test_buffer_is_100ms(self) -> None:
        assert HOLD_BUFFER_MS == 100

    def test_550ms_with_half_second_threshold_is_tap(self) -> None:
        """550 - 100 = 450 < 500 -> tap."""
        assert classify(550, 0.5) == Verdict.TAP

    def test_650ms_with_half_second_threshold_is_hold(self) -> None:
        """650 - 100 = 550 >= 500 -> hold."""
        assert classify(650, 0.5) == Verdict.HOLD

    def test_exact_boundary_is_hold(self) -> None:
        """duration == threshold*1000 + 100 should classify as hold."""
        assert classify(600, 0.5) == Verdict.HOLD
        assert classify(2100, 2.0) == Verdict.HOLD

    def test_one_ms_below_boundary_is_tap(self) -> None:
        assert classify(599, 0.5) == Verdict.TAP
        assert classify(2099, 2.0) == Verdict.TAP

    @pytest.mark.parametrize("threshold", [0.5, 1.0, 2.5, 5.0])
    def test_durations_below_boundary_are_taps(self, threshold: float) -> None:
        boundary = int(threshold * 1000) + HOLD_BUFFER_MS
        for duration in (0, 1, boundary // 2, boundary - 1):
            assert classify(duration, threshold) == Verdict.TAP

    @pytest.mark.parametrize("threshold", [0.5, 1.0, 2.5, 5.0])
    def test_durations_at_or_above_boundary_are_holds(self, threshold: float) -> None:
        boundary = int(threshold * 1000) + HOLD_BUFFER_MS
        for duration in (boundary, boundary + 1, boundary * 3):
            assert classify(duration, threshold) == Verdict.HOLD

    def test_no_threshold_never_classifies(self) -> None:
        for duration in (0, 650, 10_000, 600_000):
            assert classify(duration, None) == Verdict.UNCLASSIFIED

    def test_custom_buffer(self) -> None:
        assert classify(520, 0.5, buffer_ms=0) == Verdict.HOLD
        assert classify(520, 0.5, buffer_ms=50) == Verdict.TAP


class TestGestureTimer:
    """Tests for recording and measuring presses."""

    def test_start_records_clock_value(self, clock) -> None:
        timer = GestureTimer(clock=clock)
        settings = GestureSettings()

        started = timer.start(settings)

        assert started == clock.now
        assert settings.press_started_at == clock.now

    def test_elapsed_measures_from_start(self, clock) -> None:
        timer = GestureTimer(clock=clock)
        settings = GestureSettings()
        timer.start(settings)

        clock.advance(650)

        assert timer.elapsed_ms(settings) == 650

    def test_absent_start_measures_zero(self, clock) -> None:
        timer = GestureTimer(clock=clock)
        assert timer.elapsed_ms(GestureSettings()) == 0

    def test_future_start_measures_zero(self, clock) -> None:
        """A timestamp from before a clock restart may lie in the future."""
        timer = GestureTimer(clock=clock)
        settings = GestureSettings(press_started_at=clock.now + 5_000)
        assert timer.elapsed_ms(settings) == 0

    def test_stale_start_measures_zero(self, clock) -> None:
        timer = GestureTimer(clock=clock)
        settings = GestureSettings(press_started_at=clock.now - MAX_PLAUSIBLE_PRESS_MS - 1)
        assert timer.elapsed_ms(settings) == 0

    def test_stop_clears_start(self, clock) -> None:
        timer = GestureTimer(clock=clock)
        settings = GestureSettings()
        timer.start(settings)
        clock.advance(300)

        assert timer.stop(settings) == 300
        assert settings.press_started_at is None

    def test_stop_without_start_clears_and_returns_zero(self, clock) -> None:
        timer = GestureTimer(clock=clock)
        settings = GestureSettings()

        assert timer.stop(settings) == 0
        assert settings.press_started_at is None

    def test_default_clock_is_monotonic(self) -> None:
        first = monotonic_ms()
        second = monotonic_ms()
        assert second >= first
