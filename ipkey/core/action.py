"""IP info key action with gesture state machine.

Implements the key behaviour:
- Appear: show the cached address (or a placeholder) and refresh it
- Press: Idle -> Pressed, show "Asking…", schedule a debounced refresh
- Release: Pressed -> Idle, classify tap/hold, open the link on hold

Every handler completes its transition and persists settings even when
the sink or the refresh fails; nothing is raised back to the host.
"""

from typing import TYPE_CHECKING, Optional

from PySide6.QtCore import QObject, Signal, Slot

from .constants import ASKING_TEXT, HOLD_URL, PLACEHOLDER_TEXT
from .fetcher import RemoteValueFetcher
from .gesture import GestureTimer, classify
from .logging import Logger, get_logger
from .model import Event, GestureSettings, State, Verdict
from .scheduler import RefreshScheduler

if TYPE_CHECKING:
    from ..host.sink import HostSink


class IpInfoAction(QObject):
    """One key instance showing the public IP address.

    Timer state and refresh state are independent: a failing or
    in-flight refresh never blocks classification of a release.
    """

    state_changed = Signal(object)  # State
    gesture_classified = Signal(object, int)  # Verdict, duration_ms

    def __init__(
        self,
        sink: "HostSink",
        fetcher: Optional[RemoteValueFetcher] = None,
        scheduler: Optional[RefreshScheduler] = None,
        timer: Optional[GestureTimer] = None,
        logger: Optional[Logger] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """Initialize the action.

        Args:
            sink: Host actions (display, success, persistence, links)
            fetcher: Remote value fetcher (ignored if scheduler is given)
            scheduler: Refresh scheduler (created around fetcher if None)
            timer: Gesture timer (monotonic clock if None)
            logger: Logger instance (uses global if None)
            parent: Parent QObject
        """
        super().__init__(parent)

        self._sink = sink
        self._logger = logger or get_logger()
        self._timer = timer or GestureTimer()
        self._scheduler = scheduler or RefreshScheduler(
            fetcher or RemoteValueFetcher(),
            self.apply_refreshed_value,
            logger=self._logger,
            parent=self,
        )
        self._scheduler.refresh_failed.connect(self._on_refresh_failed)

        self._state = State.Idle
        self._settings: Optional[GestureSettings] = None

    @property
    def state(self) -> State:
        """Current gesture state."""
        return self._state

    @property
    def settings(self) -> Optional[GestureSettings]:
        """Most recent settings record seen by the action."""
        return self._settings

    @property
    def scheduler(self) -> RefreshScheduler:
        """Debounced refresh used by this action."""
        return self._scheduler

    def _set_state(self, new_state: State) -> None:
        """Update state and emit signal."""
        old_state = self._state
        self._state = new_state
        if old_state != new_state:
            self._logger.state_change(old_state.name, new_state.name)
        self.state_changed.emit(new_state)

    def _call_sink(self, method: str, *args: object) -> bool:
        """Invoke a sink action, logging instead of raising on failure."""
        try:
            getattr(self._sink, method)(*args)
        except Exception as e:
            self._logger.error(f"host action {method} failed: {e}")
            return False
        return True

    # Host events

    def on_appear(self, settings: GestureSettings) -> None:
        """Show the cached value and refresh it in the background."""
        self._settings = settings
        self._logger.debug("appear", event=Event.EV_APPEAR.name)

        self._call_sink("set_display_text", settings.cached_value or PLACEHOLDER_TEXT)
        self._call_sink("persist_settings", settings)
        self._scheduler.schedule()

    def on_press_start(self, settings: GestureSettings) -> None:
        """Idle -> Pressed: start timing and ask for a fresh value."""
        self._settings = settings
        if self._state == State.Pressed:
            self._logger.warning(
                "press without release, restarting gesture",
                event=Event.EV_PRESS.name,
            )

        started_at = self._timer.start(settings)
        self._set_state(State.Pressed)
        self._logger.trace(f"press started at {started_at}", event=Event.EV_PRESS.name)

        self._call_sink("set_display_text", ASKING_TEXT)
        self._call_sink("persist_settings", settings)
        self._scheduler.schedule()

    def on_press_end(self, settings: GestureSettings) -> Verdict:
        """Pressed -> Idle: classify the gesture and react.

        Returns:
            The verdict for this release (UNCLASSIFIED without a threshold)
        """
        self._settings = settings
        self._set_state(State.Idle)

        verdict = Verdict.UNCLASSIFIED
        duration_ms = 0
        try:
            duration_ms = self._timer.stop(settings)
            verdict = classify(duration_ms, settings.hold_threshold_seconds)
            self._logger.gesture(verdict.value, duration_ms)

            if verdict == Verdict.HOLD:
                self._call_sink("open_external_url", HOLD_URL)
                self._call_sink("show_success_indicator")
        except Exception as e:
            self._logger.error(
                f"release handling failed: {e}",
                event=Event.EV_RELEASE.name,
            )
        finally:
            settings.press_started_at = None
            self._call_sink("persist_settings", settings)

        self.gesture_classified.emit(verdict, duration_ms)
        return verdict

    def dispose(self) -> None:
        """Key removed by the host: drop any pending refresh."""
        self._scheduler.cancel()
        self._set_state(State.Idle)
        self._settings = None

    # Refresh result

    def apply_refreshed_value(self, value: str) -> None:
        """Store a freshly fetched, formatted value and display it."""
        if self._settings is None:
            self._settings = GestureSettings()

        self._settings.cached_value = value
        self._call_sink("set_display_text", value)
        self._call_sink("persist_settings", self._settings)

    @Slot(str)
    def _on_refresh_failed(self, message: str) -> None:
        """Replace "Asking…" with the value that is still cached."""
        cached = self._settings.cached_value if self._settings else None
        self._call_sink("set_display_text", cached or PLACEHOLDER_TEXT)
