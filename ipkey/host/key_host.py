"""Host event boundary.

KeyHost delivers appear/press/release events for one key instance as Qt
signals, each carrying the settings record the host currently holds.
SimulatedKeyHost drives those events from timers for the command line.
"""

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..core.logging import Logger, get_logger
from .settings_store import SettingsStore


class KeyHost(QObject):
    """Source of key events for one key instance."""

    appeared = Signal(object)
    pressed = Signal(object)
    released = Signal(object)
    removed = Signal()

    def __init__(self, context: str, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._context = context

    @property
    def context(self) -> str:
        """Host identifier of the key instance."""
        return self._context


class SimulatedKeyHost(KeyHost):
    """KeyHost that replays a single press of a given length.

    Records come from the same SettingsStore the sink persists to, so
    every event sees what the previous one wrote.
    """

    def __init__(
        self,
        store: SettingsStore,
        logger: Optional[Logger] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(store.context, parent)
        self._store = store
        self._hold_ms = 0
        self._logger = logger or get_logger()

    def appear(self) -> None:
        self._logger.trace("host: willAppear")
        self.appeared.emit(self._store.load_record())

    def press(self) -> None:
        self._logger.trace("host: keyDown")
        self.pressed.emit(self._store.load_record())

    def release(self) -> None:
        self._logger.trace("host: keyUp")
        self.released.emit(self._store.load_record())

    def remove(self) -> None:
        self._logger.trace("host: willDisappear")
        self.removed.emit()

    def play(self, hold_ms: int, start_delay_ms: int = 0) -> None:
        """Appear, press, and release hold_ms after the press."""
        self._hold_ms = max(0, hold_ms)
        QTimer.singleShot(max(0, start_delay_ms), self._start_press)

    def _start_press(self) -> None:
        self.appear()
        self.press()
        QTimer.singleShot(self._hold_ms, self.release)
