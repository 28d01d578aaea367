"""Global constants for the IP info key action."""

from typing import Final

# Endpoints
IP_ECHO_URL: Final[str] = "https://ifconfig.me/ip"
"""Returns the caller's public address as plain text"""

HOLD_URL: Final[str] = "https://ifconfig.me"
"""Opened in the browser when a Hold is detected"""

# Timing constants
REFRESH_DEBOUNCE_MS: Final[int] = 500
"""Delay before a scheduled refresh actually fetches"""

FETCH_TIMEOUT_SEC: Final[float] = 5.0
"""Upper bound for the single outbound request"""

HOLD_BUFFER_MS: Final[int] = 100
"""Subtracted from the measured duration before comparing to the threshold"""

MAX_PLAUSIBLE_PRESS_MS: Final[int] = 10 * 60 * 1000
"""Press timestamps older than this are treated as stale (duration 0)"""

# Hold threshold (user configurable)
HOLD_THRESHOLD_MIN_SEC: Final[float] = 0.5
HOLD_THRESHOLD_MAX_SEC: Final[float] = 5.0
HOLD_THRESHOLD_STEP_SEC: Final[float] = 0.5
HOLD_THRESHOLD_DEFAULT_SEC: Final[float] = 0.5
"""Value preselected by the configuration control"""

# Display texts
PLACEHOLDER_TEXT: Final[str] = "No IP Address"
ASKING_TEXT: Final[str] = "Asking…"
VALUE_DELIMITER: Final[str] = "."

# Persistence
SETTINGS_ORGANIZATION: Final[str] = "IPKey"
SETTINGS_APPLICATION: Final[str] = "ipkey"
USER_AGENT: Final[str] = "ipkey/1.0"

# Logging
LOG_BUFFER_SIZE: Final[int] = 200
"""Maximum entries kept by the log ring buffer"""
