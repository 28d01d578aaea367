"""Gesture timer and tap/hold classification.

Durations are measured on the monotonic clock so wall-clock adjustments
between press and release cannot skew them.
"""

import time
from typing import Callable, Optional

from .constants import HOLD_BUFFER_MS, MAX_PLAUSIBLE_PRESS_MS
from .model import GestureSettings, Verdict


def monotonic_ms() -> int:
    """Current monotonic time in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


def classify(
    duration_ms: int,
    threshold_seconds: Optional[float],
    buffer_ms: int = HOLD_BUFFER_MS,
) -> Verdict:
    """Classify a press duration as tap or hold.

    The buffer is subtracted before comparing, so with a 0.5s threshold
    a 550ms press is a tap (450 < 500) and a 650ms press a hold.
    A duration of exactly threshold + buffer counts as a hold.

    Args:
        duration_ms: Measured press duration
        threshold_seconds: Configured hold threshold, None disables classification
        buffer_ms: Jitter allowance subtracted from the duration

    Returns:
        Verdict.UNCLASSIFIED if no threshold is set, otherwise TAP or HOLD
    """
    if threshold_seconds is None:
        return Verdict.UNCLASSIFIED

    if duration_ms - buffer_ms >= threshold_seconds * 1000:
        return Verdict.HOLD
    return Verdict.TAP


class GestureTimer:
    """Records the press instant in the settings and measures elapsed time."""

    def __init__(
        self,
        clock: Callable[[], int] = monotonic_ms,
        max_plausible_ms: int = MAX_PLAUSIBLE_PRESS_MS,
    ) -> None:
        """Initialize the timer.

        Args:
            clock: Millisecond clock (monotonic in production)
            max_plausible_ms: Older press timestamps are considered stale
        """
        self._clock = clock
        self._max_plausible_ms = max_plausible_ms

    def start(self, settings: GestureSettings) -> int:
        """Record the press start and return the timestamp."""
        settings.press_started_at = self._clock()
        return settings.press_started_at

    def elapsed_ms(self, settings: GestureSettings) -> int:
        """Milliseconds since the recorded press start.

        Returns 0 when the timestamp is absent, lies in the future
        (clock restarted since the press) or is implausibly old.
        """
        started = settings.press_started_at
        if started is None:
            return 0

        elapsed = self._clock() - started
        if elapsed < 0 or elapsed > self._max_plausible_ms:
            return 0
        return elapsed

    def stop(self, settings: GestureSettings) -> int:
        """Return the elapsed time and clear the press start."""
        try:
            return self.elapsed_ms(settings)
        finally:
            settings.press_started_at = None
