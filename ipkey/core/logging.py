"""Thread-safe logging system with circular buffer.

Provides the logging interface for the key action that:
- Uses a circular buffer (max 200 entries) to prevent memory growth
- Filters entries below a configurable level (TRACE records everything)
- Formats log entries with timestamps and gesture context
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from threading import Lock
from typing import Any, Callable, Optional

from .constants import LOG_BUFFER_SIZE


class LogLevel(IntEnum):
    """Log entry severity levels, ordered by severity."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


@dataclass
class LogEntry:
    """A single log entry.

    Attributes:
        timestamp: When the entry was created
        level: Severity level
        message: Log message content
        state: Gesture state when the entry was logged (if applicable)
        event: Event being handled (if applicable)
        duration_ms: Measured press duration (if applicable)
    """

    timestamp: datetime
    level: LogLevel
    message: str
    state: Optional[str] = None
    event: Optional[str] = None
    duration_ms: Optional[int] = None

    def format(self) -> str:
        """Format the log entry as a string."""
        time_str = self.timestamp.strftime("%H:%M:%S.%f")[:-3]
        parts = [f"[{time_str}]", f"[{self.level.name}]"]

        if self.state:
            parts.append(f"[{self.state}]")

        if self.event:
            parts.append(f"<{self.event}>")

        parts.append(self.message)

        if self.duration_ms is not None:
            parts.append(f"duration={self.duration_ms}ms")

        return " ".join(parts)


@dataclass
class LogBuffer:
    """Thread-safe circular buffer for log entries.

    Uses a deque with maxlen to automatically discard old entries.
    """

    max_size: int = LOG_BUFFER_SIZE
    _buffer: deque[LogEntry] = field(default_factory=lambda: deque(maxlen=LOG_BUFFER_SIZE))
    _lock: Lock = field(default_factory=Lock)
    _listeners: list[Callable[[LogEntry], None]] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Reinitialize buffer with correct maxlen if max_size differs."""
        if self._buffer.maxlen != self.max_size:
            self._buffer = deque(maxlen=self.max_size)

    def add(self, entry: LogEntry) -> None:
        """Add a log entry to the buffer (thread-safe)."""
        with self._lock:
            self._buffer.append(entry)

        # Notify listeners outside the lock
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception:
                # A broken listener must not break logging
                continue

    def get_all(self) -> list[LogEntry]:
        """Get all entries in the buffer (thread-safe)."""
        with self._lock:
            return list(self._buffer)

    def get_recent(self, count: int) -> list[LogEntry]:
        """Get the most recent N entries (thread-safe)."""
        with self._lock:
            if count >= len(self._buffer):
                return list(self._buffer)
            return list(self._buffer)[-count:]

    def clear(self) -> None:
        """Clear all entries (thread-safe)."""
        with self._lock:
            self._buffer.clear()

    def add_listener(self, callback: Callable[[LogEntry], None]) -> None:
        """Add a listener to be notified of new entries."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[LogEntry], None]) -> None:
        """Remove a listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def __len__(self) -> int:
        """Return current buffer size."""
        with self._lock:
            return len(self._buffer)


class Logger:
    """Main logging interface for the key action.

    Provides convenience methods for logging at different levels
    with optional context (state, event, duration).
    """

    def __init__(
        self,
        buffer: Optional[LogBuffer] = None,
        level: LogLevel = LogLevel.DEBUG,
    ) -> None:
        """Initialize logger with optional existing buffer and minimum level."""
        self._buffer = buffer or LogBuffer()
        self._level = level
        self._current_state: Optional[str] = None

    @property
    def buffer(self) -> LogBuffer:
        """Access the underlying log buffer."""
        return self._buffer

    @property
    def level(self) -> LogLevel:
        """Minimum level that is recorded."""
        return self._level

    def set_level(self, level: LogLevel) -> None:
        """Set the minimum level; TRACE records everything."""
        self._level = level

    def set_state(self, state: str) -> None:
        """Set the current state for subsequent log entries."""
        self._current_state = state

    def clear_context(self) -> None:
        """Clear current state context."""
        self._current_state = None

    def _log(
        self,
        level: LogLevel,
        message: str,
        event: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> Optional[LogEntry]:
        """Internal logging method, returns None when filtered out."""
        if level < self._level:
            return None

        entry = LogEntry(
            timestamp=datetime.now(),
            level=level,
            message=message,
            state=self._current_state,
            event=event,
            duration_ms=duration_ms,
        )
        self._buffer.add(entry)
        return entry

    def trace(self, message: str, **kwargs: Any) -> Optional[LogEntry]:
        """Log a trace message."""
        return self._log(LogLevel.TRACE, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> Optional[LogEntry]:
        """Log a debug message."""
        return self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> Optional[LogEntry]:
        """Log an info message."""
        return self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> Optional[LogEntry]:
        """Log a warning message."""
        return self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> Optional[LogEntry]:
        """Log an error message."""
        return self._log(LogLevel.ERROR, message, **kwargs)

    def state_change(self, old_state: str, new_state: str) -> Optional[LogEntry]:
        """Log a state transition."""
        self.set_state(new_state)
        return self.debug(f"state: {old_state} -> {new_state}")

    def gesture(self, verdict: str, duration_ms: int) -> Optional[LogEntry]:
        """Log the classification of a release."""
        return self.info(f"gesture classified as {verdict}", duration_ms=duration_ms)


# Global logger instance for convenience
_global_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get the global logger instance, creating one if needed."""
    global _global_logger
    if _global_logger is None:
        _global_logger = Logger()
    return _global_logger


def set_logger(logger: Logger) -> None:
    """Set the global logger instance."""
    global _global_logger
    _global_logger = logger
