"""Tests for the logging system.

Verifies that:
- Entries below the configured level are dropped
- The ring buffer keeps only the newest entries
- Entries format with level, state and duration context
"""

from ipkey.core.logging import LogBuffer, Logger, LogLevel, get_logger, set_logger


class TestLogLevels:
    """Tests for level filtering."""

    def test_levels_are_ordered(self) -> None:
        assert LogLevel.TRACE < LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARNING < LogLevel.ERROR

    def test_below_level_dropped(self) -> None:
        logger = Logger(level=LogLevel.INFO)

        assert logger.debug("hidden") is None
        assert logger.info("shown") is not None
        assert len(logger.buffer) == 1

    def test_trace_records_everything(self) -> None:
        logger = Logger()
        logger.set_level(LogLevel.TRACE)

        logger.trace("t")
        logger.error("e")

        assert [e.level for e in logger.buffer.get_all()] == [LogLevel.TRACE, LogLevel.ERROR]


class TestLogBuffer:
    """Tests for the circular buffer."""

    def test_oldest_entries_discarded(self) -> None:
        logger = Logger(buffer=LogBuffer(max_size=3))
        for i in range(5):
            logger.info(f"m{i}")

        assert [e.message for e in logger.buffer.get_all()] == ["m2", "m3", "m4"]

    def test_get_recent(self) -> None:
        logger = Logger()
        for i in range(4):
            logger.info(f"m{i}")

        assert [e.message for e in logger.buffer.get_recent(2)] == ["m2", "m3"]

    def test_listener_notified_and_errors_ignored(self) -> None:
        buffer = LogBuffer()
        seen = []

        def broken(entry) -> None:
            raise RuntimeError("listener bug")

        buffer.add_listener(broken)
        buffer.add_listener(seen.append)
        Logger(buffer=buffer).warning("w")

        assert len(seen) == 1


class TestLogFormat:
    """Tests for LogEntry.format()."""

    def test_gesture_entry_includes_context(self) -> None:
        logger = Logger()
        logger.state_change("Pressed", "Idle")
        entry = logger.gesture("hold", 650)

        text = entry.format()
        assert "[INFO]" in text
        assert "[Idle]" in text
        assert "gesture classified as hold" in text
        assert "duration=650ms" in text


class TestGlobalLogger:
    """Tests for get_logger / set_logger."""

    def test_set_logger_replaces_global(self) -> None:
        previous = get_logger()
        replacement = Logger()
        try:
            set_logger(replacement)
            assert get_logger() is replacement
        finally:
            set_logger(previous)
