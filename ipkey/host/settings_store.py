"""QSettings-backed persistence of per-key settings records.

Each key instance (context) stores its record as one JSON string under
actions/<context>/settings.
"""

import json
from typing import Optional

from PySide6.QtCore import QSettings

from ..core.constants import SETTINGS_APPLICATION, SETTINGS_ORGANIZATION
from ..core.logging import Logger, get_logger
from ..core.model import GestureSettings


class SettingsStore:
    """Loads and saves the settings record of one key instance."""

    def __init__(
        self,
        context: str,
        settings: Optional[QSettings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialize the store.

        Args:
            context: Host identifier of the key instance
            settings: QSettings to use (default: user scope for IPKey/ipkey)
            logger: Logger instance (uses global if None)
        """
        self._context = context
        self._settings = settings or QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)
        self._logger = logger or get_logger()

    @property
    def context(self) -> str:
        """Key instance this store belongs to."""
        return self._context

    @property
    def _key(self) -> str:
        return f"actions/{self._context}/settings"

    def load_record(self) -> dict:
        """Return the stored record, or an empty one if missing or corrupt."""
        raw = self._settings.value(self._key)
        if raw is None or raw == "":
            return {}

        try:
            record = json.loads(raw)
        except (TypeError, ValueError) as e:
            self._logger.warning(f"stored settings for {self._context} unreadable: {e}")
            return {}

        if not isinstance(record, dict):
            self._logger.warning(f"stored settings for {self._context} are not a record")
            return {}
        return record

    def load(self) -> GestureSettings:
        """Return the stored settings (empty on first appearance)."""
        return GestureSettings.from_record(self.load_record())

    def save(self, settings: GestureSettings) -> None:
        """Persist the settings record as a whole."""
        self._settings.setValue(self._key, json.dumps(settings.to_record()))
        self._settings.sync()

    def remove(self) -> None:
        """Forget the key instance."""
        self._settings.remove(f"actions/{self._context}")
        self._settings.sync()
