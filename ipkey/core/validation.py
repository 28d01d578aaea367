"""Settings boundary validation.

Every value that reaches the gesture classifier or the display passes
through here first:
- Hold threshold is clamped to [0.5, 5.0] and snapped to the 0.5 grid
- Non-numeric thresholds are rejected (treated as unset)
- Fetched text must be a single, well-formed IP address
"""

import ipaddress
import math
from dataclasses import dataclass
from typing import Any, Optional

from .constants import (
    HOLD_THRESHOLD_MAX_SEC,
    HOLD_THRESHOLD_MIN_SEC,
    HOLD_THRESHOLD_STEP_SEC,
)
from .model import (
    KEY_CACHED_VALUE,
    KEY_HOLD_THRESHOLD,
    KEY_PRESS_STARTED_AT,
    is_timestamp,
)


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes:
        valid: True if validation passed
        errors: List of error messages if validation failed
    """

    valid: bool
    errors: list[str]

    @classmethod
    def success(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[])

    @classmethod
    def failure(cls, *errors: str) -> "ValidationResult":
        """Create a failed validation result with error messages."""
        return cls(valid=False, errors=list(errors))

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to [min_val, max_val] range."""
    return max(min_val, min(max_val, value))


def _as_number(value: Any) -> Optional[float]:
    """Convert a record value to a finite float, or None if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def normalize_hold_threshold(value: Any) -> Optional[float]:
    """Bring a configured hold threshold into the supported range.

    Args:
        value: Raw value from the settings record (number, numeric string or None)

    Returns:
        Threshold in seconds on the 0.5 grid within [0.5, 5.0],
        or None if the value is absent or not numeric
    """
    number = _as_number(value)
    if number is None:
        return None

    steps = math.floor(number / HOLD_THRESHOLD_STEP_SEC + 0.5)
    snapped = steps * HOLD_THRESHOLD_STEP_SEC
    return clamp(snapped, HOLD_THRESHOLD_MIN_SEC, HOLD_THRESHOLD_MAX_SEC)


def validate_hold_threshold(value: Any) -> ValidationResult:
    """Check whether a threshold can be used as-is.

    Absent values are valid (classification is simply disabled).
    """
    if value is None:
        return ValidationResult.success()

    number = _as_number(value)
    if number is None:
        return ValidationResult.failure(
            f"{KEY_HOLD_THRESHOLD}={value!r} is not a number, ignoring it"
        )

    normalized = normalize_hold_threshold(number)
    if normalized != number:
        return ValidationResult.failure(
            f"{KEY_HOLD_THRESHOLD}={number} adjusted to {normalized} "
            f"(allowed {HOLD_THRESHOLD_MIN_SEC}-{HOLD_THRESHOLD_MAX_SEC} "
            f"in steps of {HOLD_THRESHOLD_STEP_SEC})"
        )

    return ValidationResult.success()


def validate_settings_record(record: Optional[dict[str, Any]]) -> ValidationResult:
    """Validate a raw settings record received from the host.

    Checks:
    - cachedValue is a non-empty string if present
    - pressStartedAt is an integer timestamp if present
    - holdThresholdSeconds is numeric and within range if present

    Args:
        record: The record as delivered by the host

    Returns:
        ValidationResult listing every field that will be dropped or adjusted
    """
    if record is None:
        return ValidationResult.success()

    errors: list[str] = []

    cached = record.get(KEY_CACHED_VALUE)
    if cached is not None and (not isinstance(cached, str) or not cached):
        errors.append(f"{KEY_CACHED_VALUE}={cached!r} is not a display value, dropping it")

    started = record.get(KEY_PRESS_STARTED_AT)
    if started is not None and not is_timestamp(started):
        errors.append(f"{KEY_PRESS_STARTED_AT}={started!r} is not a timestamp, dropping it")

    errors.extend(validate_hold_threshold(record.get(KEY_HOLD_THRESHOLD)).errors)

    if errors:
        return ValidationResult.failure(*errors)
    return ValidationResult.success()


def validate_fetched_value(text: Optional[str]) -> ValidationResult:
    """Validate text returned by the IP echo endpoint.

    Args:
        text: Stripped response body

    Returns:
        ValidationResult indicating whether the text is a usable address
    """
    if not text:
        return ValidationResult.failure("response body is empty")

    if any(ch.isspace() for ch in text):
        return ValidationResult.failure("response body is not a single token")

    try:
        ipaddress.ip_address(text)
    except ValueError:
        shown = text if len(text) <= 40 else text[:37] + "..."
        return ValidationResult.failure(f"response body is not an IP address: {shown!r}")

    return ValidationResult.success()
