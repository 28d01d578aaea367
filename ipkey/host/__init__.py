"""Host-side adapters for the key action.

This package provides the collaborators the core talks to:
- KeyHost / SimulatedKeyHost: key events as Qt signals
- HostSink / QtHostSink: display, success indicator, links, persistence
- SettingsStore: QSettings-backed settings records
"""

from .key_host import KeyHost, SimulatedKeyHost
from .settings_store import SettingsStore
from .sink import HostSink, QtHostSink

__all__ = [
    "KeyHost",
    "SimulatedKeyHost",
    "HostSink",
    "QtHostSink",
    "SettingsStore",
]
