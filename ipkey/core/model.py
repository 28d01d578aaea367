"""Core data models for the IP info key.

Defines the persisted settings record and the enums used by the
gesture state machine.
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional


class State(Enum):
    """Gesture state machine states."""

    Idle = auto()
    """No press in progress"""

    Pressed = auto()
    """Between a press and its matching release"""


class Verdict(Enum):
    """Outcome of classifying one press/release pair."""

    TAP = "tap"
    HOLD = "hold"
    UNCLASSIFIED = "unclassified"
    """No hold threshold configured, only cleanup happens"""


class Event(Enum):
    """Events that drive the action, used for log context."""

    EV_APPEAR = auto()
    EV_PRESS = auto()
    EV_RELEASE = auto()
    EV_REFRESH_DONE = auto()
    EV_REFRESH_FAILED = auto()


# Keys of the opaque record the host persists
KEY_CACHED_VALUE = "cachedValue"
KEY_PRESS_STARTED_AT = "pressStartedAt"
KEY_HOLD_THRESHOLD = "holdThresholdSeconds"


def is_timestamp(value: Any) -> bool:
    """True for a finite int or float (bools and NaN/inf excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass
class GestureSettings:
    """Per-key settings persisted by the host.

    Attributes:
        cached_value: Last successfully fetched value, formatted for display
        press_started_at: Monotonic milliseconds at press start (None when idle)
        hold_threshold_seconds: Minimum hold duration, None disables classification
    """

    cached_value: Optional[str] = None
    press_started_at: Optional[int] = None
    hold_threshold_seconds: Optional[float] = None

    @classmethod
    def from_record(cls, record: Optional[dict[str, Any]]) -> "GestureSettings":
        """Build settings from a host record, passing it through the settings boundary."""
        from .validation import normalize_hold_threshold

        record = record or {}

        cached = record.get(KEY_CACHED_VALUE)
        if not isinstance(cached, str) or not cached:
            cached = None

        started = record.get(KEY_PRESS_STARTED_AT)
        if not is_timestamp(started):
            started = None
        else:
            started = int(started)

        return cls(
            cached_value=cached,
            press_started_at=started,
            hold_threshold_seconds=normalize_hold_threshold(
                record.get(KEY_HOLD_THRESHOLD)
            ),
        )

    def to_record(self) -> dict[str, Any]:
        """Return the record the host persists; absent fields are omitted."""
        record: dict[str, Any] = {}
        if self.cached_value is not None:
            record[KEY_CACHED_VALUE] = self.cached_value
        if self.press_started_at is not None:
            record[KEY_PRESS_STARTED_AT] = self.press_started_at
        if self.hold_threshold_seconds is not None:
            record[KEY_HOLD_THRESHOLD] = self.hold_threshold_seconds
        return record
