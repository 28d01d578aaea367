"""Host action boundary.

HostSink is what the action calls to show text, flash success, persist
settings and open links. QtHostSink implements it on top of Qt.
"""

from typing import Optional

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtGui import QDesktopServices

from ..core.logging import Logger, get_logger
from ..core.model import GestureSettings
from .settings_store import SettingsStore


class HostSink:
    """Fire-and-forget actions the host performs for the key."""

    def set_display_text(self, text: str) -> None:
        """Show text on the key."""
        raise NotImplementedError

    def show_success_indicator(self) -> None:
        """Flash the host's success mark on the key."""
        raise NotImplementedError

    def persist_settings(self, settings: GestureSettings) -> None:
        """Store the whole settings record for this key."""
        raise NotImplementedError

    def open_external_url(self, url: str) -> None:
        """Open a link in the user's browser."""
        raise NotImplementedError


class QtHostSink(QObject, HostSink):
    """HostSink backed by Qt signals, QSettings and the desktop browser.

    The key display itself is not rendered here; interested parties
    connect to title_changed and success_shown.
    """

    title_changed = Signal(str)
    success_shown = Signal()
    url_opened = Signal(str)

    def __init__(
        self,
        store: SettingsStore,
        open_browser: bool = True,
        logger: Optional[Logger] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """Initialize the sink.

        Args:
            store: Persistence for this key instance
            open_browser: If False, URLs are only logged and signalled
            logger: Logger instance (uses global if None)
            parent: Parent QObject
        """
        super().__init__(parent)

        self._store = store
        self._open_browser = open_browser
        self._logger = logger or get_logger()
        self._title = ""

    @property
    def title(self) -> str:
        """Text currently shown on the key."""
        return self._title

    def set_display_text(self, text: str) -> None:
        self._title = text
        self._logger.trace(f"title: {text!r}")
        self.title_changed.emit(text)

    def show_success_indicator(self) -> None:
        self._logger.debug("success indicator shown")
        self.success_shown.emit()

    def persist_settings(self, settings: GestureSettings) -> None:
        self._store.save(settings)
        self._logger.trace(f"settings persisted: {settings.to_record()}")

    def open_external_url(self, url: str) -> None:
        if not self._open_browser:
            self._logger.info(f"browser disabled, not opening {url}")
        elif QDesktopServices.openUrl(QUrl(url)):
            self._logger.info(f"opened {url}")
        else:
            self._logger.warning(f"could not open {url}")
        self.url_opened.emit(url)
