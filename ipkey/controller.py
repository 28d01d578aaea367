"""Controller that wires a key host to the IP info action.

Decodes settings records at the settings boundary, reports anything the
boundary had to drop or adjust, and forwards events to the action.
"""

from typing import Optional

from PySide6.QtCore import QObject, Slot

from ipkey.core.action import IpInfoAction
from ipkey.core.fetcher import RemoteValueFetcher
from ipkey.core.logging import get_logger
from ipkey.core.model import GestureSettings
from ipkey.core.validation import validate_settings_record
from ipkey.host.key_host import KeyHost
from ipkey.host.sink import HostSink


class ActionController(QObject):
    """Controller that connects one key host to one action.

    Responsibilities:
    - Wire host signals to the action's event handlers
    - Validate settings records before they reach the action
    - Dispose of the action when the key is removed
    """

    def __init__(
        self,
        host: KeyHost,
        sink: HostSink,
        fetcher: Optional[RemoteValueFetcher] = None,
        action: Optional[IpInfoAction] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            host: Source of key events
            sink: Host actions used by the action
            fetcher: Remote value fetcher (default endpoint if None)
            action: Pre-built action (built from sink and fetcher if None)
            parent: Parent QObject
        """
        super().__init__(parent)

        self._host = host
        self._logger = get_logger()
        self._action = action or IpInfoAction(sink, fetcher=fetcher, parent=self)

        self._connect_signals()

    @property
    def action(self) -> IpInfoAction:
        """Action driven by this controller."""
        return self._action

    def _connect_signals(self) -> None:
        """Connect host signals to the action."""
        self._host.appeared.connect(self._on_appeared)
        self._host.pressed.connect(self._on_pressed)
        self._host.released.connect(self._on_released)
        self._host.removed.connect(self._on_removed)

    def _decode(self, record: dict) -> GestureSettings:
        """Run a record through the settings boundary."""
        validation = validate_settings_record(record)
        if not validation.valid:
            self._logger.warning(
                f"settings for {self._host.context}: " + "; ".join(validation.errors)
            )
        return GestureSettings.from_record(record)

    @Slot(object)
    def _on_appeared(self, record: dict) -> None:
        self._action.on_appear(self._decode(record))

    @Slot(object)
    def _on_pressed(self, record: dict) -> None:
        self._action.on_press_start(self._decode(record))

    @Slot(object)
    def _on_released(self, record: dict) -> None:
        self._action.on_press_end(self._decode(record))

    @Slot()
    def _on_removed(self) -> None:
        self._logger.info(f"key {self._host.context} removed")
        self._action.dispose()
