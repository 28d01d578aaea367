"""Core gesture and refresh logic.

This package provides the core functionality for the IP info key:
- Data models (GestureSettings, State, Verdict, Event)
- Remote value fetching and display formatting
- Debounced refresh scheduling
- Gesture timing and tap/hold classification
- Logging with circular buffer
"""

from .constants import (
    ASKING_TEXT,
    FETCH_TIMEOUT_SEC,
    HOLD_BUFFER_MS,
    HOLD_THRESHOLD_DEFAULT_SEC,
    HOLD_THRESHOLD_MAX_SEC,
    HOLD_THRESHOLD_MIN_SEC,
    HOLD_THRESHOLD_STEP_SEC,
    HOLD_URL,
    IP_ECHO_URL,
    LOG_BUFFER_SIZE,
    PLACEHOLDER_TEXT,
    REFRESH_DEBOUNCE_MS,
)
from .model import Event, GestureSettings, State, Verdict

__all__ = [
    # Constants
    "IP_ECHO_URL",
    "HOLD_URL",
    "REFRESH_DEBOUNCE_MS",
    "FETCH_TIMEOUT_SEC",
    "HOLD_BUFFER_MS",
    "HOLD_THRESHOLD_MIN_SEC",
    "HOLD_THRESHOLD_MAX_SEC",
    "HOLD_THRESHOLD_STEP_SEC",
    "HOLD_THRESHOLD_DEFAULT_SEC",
    "PLACEHOLDER_TEXT",
    "ASKING_TEXT",
    "LOG_BUFFER_SIZE",
    # Models
    "State",
    "Verdict",
    "Event",
    "GestureSettings",
]
