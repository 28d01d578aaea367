"""Shared fixtures: a Qt core application and test doubles."""

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer

from ipkey.core.model import GestureSettings
from ipkey.host.sink import HostSink


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """QTimer and signals need a core application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def spin_event_loop(ms: int) -> None:
    """Run the Qt event loop for roughly ms milliseconds."""
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingSink(HostSink):
    """HostSink that records every call."""

    def __init__(self) -> None:
        self.titles: list[str] = []
        self.success_count = 0
        self.opened_urls: list[str] = []
        self.persisted: list[dict] = []

    def set_display_text(self, text: str) -> None:
        self.titles.append(text)

    def show_success_indicator(self) -> None:
        self.success_count += 1

    def persist_settings(self, settings: GestureSettings) -> None:
        self.persisted.append(settings.to_record())

    def open_external_url(self, url: str) -> None:
        self.opened_urls.append(url)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def spin():
    """Callable that runs the event loop for the given milliseconds."""
    return spin_event_loop
