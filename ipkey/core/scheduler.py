"""Debounced refresh of the cached IP address.

A single single-shot QTimer backs the scheduler: scheduling again while
a refresh is pending restarts the timer, so only the last call in a
debounce window fetches. The fetch itself runs on a worker thread and
its result comes back to the event loop as a queued signal, so key
events keep being processed while the request is in flight. A result
whose refresh was superseded by a newer schedule() is dropped.
Failures are logged and reported through a signal; they never reach
the caller of schedule().
"""

from typing import Callable, Optional

from PySide6.QtCore import QObject, QThread, QTimer, Signal, Slot

from .constants import REFRESH_DEBOUNCE_MS
from .fetcher import FetchError, RemoteValueFetcher, format_display_value
from .logging import Logger, get_logger
from .model import Event


class FetchWorker(QObject):
    """Runs one fetch in a separate thread."""

    # fetch id, generation, success, formatted value or error message, raw text
    done = Signal(int, int, bool, str, str)

    def __init__(self, fetcher: RemoteValueFetcher, fetch_id: int, generation: int) -> None:
        super().__init__()
        self._fetcher = fetcher
        self._fetch_id = fetch_id
        self._generation = generation

    @Slot()
    def run(self) -> None:
        """Fetch and format. Called in the worker thread."""
        try:
            raw = self._fetcher.fetch()
            value = format_display_value(raw)
        except FetchError as e:
            self.done.emit(self._fetch_id, self._generation, False, str(e), "")
        except Exception as e:
            message = f"unexpected refresh error: {e}"
            self.done.emit(self._fetch_id, self._generation, False, message, "")
        else:
            self.done.emit(self._fetch_id, self._generation, True, value, raw)


class RefreshScheduler(QObject):
    """Debounced, cancel-and-rearm refresh of one external value."""

    refreshed = Signal(str)  # formatted value
    refresh_failed = Signal(str)  # error message

    def __init__(
        self,
        fetcher: RemoteValueFetcher,
        on_value: Callable[[str], None],
        delay_ms: int = REFRESH_DEBOUNCE_MS,
        logger: Optional[Logger] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            fetcher: Performs the actual request
            on_value: Receives the formatted value after a successful fetch
            delay_ms: Default debounce delay
            logger: Logger instance (uses global if None)
            parent: Parent QObject
        """
        super().__init__(parent)

        self._fetcher = fetcher
        self._on_value = on_value
        self._delay_ms = delay_ms
        self._logger = logger or get_logger()
        self._fetch_count = 0

        # Bumped by schedule() and cancel(); results of older fetches are stale
        self._generation = 0
        self._inflight: dict[int, tuple[QThread, FetchWorker]] = {}  # by fetch id

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.refresh_now)

    @property
    def delay_ms(self) -> int:
        """Default debounce delay."""
        return self._delay_ms

    @property
    def is_pending(self) -> bool:
        """True while a refresh is armed and has not fired yet."""
        return self._timer.isActive()

    @property
    def is_fetching(self) -> bool:
        """True while a fetch is running on a worker thread."""
        return bool(self._inflight)

    @property
    def is_busy(self) -> bool:
        """True while a refresh is armed or in flight."""
        return self.is_pending or self.is_fetching

    @property
    def fetch_count(self) -> int:
        """Number of fetches started so far."""
        return self._fetch_count

    def schedule(self, delay_ms: Optional[int] = None) -> None:
        """Arm a refresh, superseding any pending or in-flight one.

        Args:
            delay_ms: Delay before fetching (default: the scheduler's delay)
        """
        delay = self._delay_ms if delay_ms is None else max(0, delay_ms)
        if self._timer.isActive():
            self._logger.trace("pending refresh superseded")
        self._generation += 1
        self._timer.start(delay)
        self._logger.trace(f"refresh armed in {delay}ms")

    def cancel(self) -> None:
        """Drop a pending refresh and ignore any fetch still in flight."""
        self._generation += 1
        if self._timer.isActive():
            self._timer.stop()
            self._logger.debug("pending refresh cancelled")

    @Slot()
    def refresh_now(self) -> None:
        """Start a fetch on a worker thread.

        Called by the timer on expiry. Never raises; the outcome arrives
        later through refreshed or refresh_failed.
        """
        self._fetch_count += 1
        fetch_id = self._fetch_count

        worker = FetchWorker(self._fetcher, fetch_id, self._generation)
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.done.connect(self._on_fetch_done)

        self._inflight[fetch_id] = (thread, worker)
        self._logger.trace(f"fetch #{fetch_id} started")
        thread.start()

    def wait_idle(self) -> None:
        """Block until every worker thread has finished (shutdown)."""
        for thread, _worker in list(self._inflight.values()):
            thread.quit()
            thread.wait()
        self._inflight.clear()

    def _release_worker(self, fetch_id: int) -> None:
        """Stop and dispose of the thread that ran a fetch."""
        entry = self._inflight.pop(fetch_id, None)
        if entry is None:
            return
        thread, _worker = entry
        thread.quit()
        thread.wait()

    @Slot(int, int, bool, str, str)
    def _on_fetch_done(
        self, fetch_id: int, generation: int, ok: bool, payload: str, raw: str
    ) -> None:
        """Handle a fetch result on the event loop thread."""
        self._release_worker(fetch_id)

        if generation != self._generation:
            self._logger.debug("refresh result superseded, dropping it")
            return

        if not ok:
            self._logger.warning(
                f"refresh failed, keeping previous value: {payload}",
                event=Event.EV_REFRESH_FAILED.name,
            )
            self.refresh_failed.emit(payload)
            return

        try:
            self._on_value(payload)
        except Exception as e:
            self._logger.error(
                f"could not apply refreshed value: {e}",
                event=Event.EV_REFRESH_FAILED.name,
            )
            self.refresh_failed.emit(str(e))
            return

        self._logger.info(
            f"refreshed value: {raw}",
            event=Event.EV_REFRESH_DONE.name,
        )
        self.refreshed.emit(payload)
