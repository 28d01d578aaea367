"""IPKey command line entry point.

Replays one press of the IP info key on a real Qt event loop: the key
appears, is pressed for --hold seconds and released. The key title is
printed whenever it changes, and log entries go to stderr.

Example:
    ipkey --threshold 1.0 --hold 1.5
"""

import argparse
import sys
from typing import Optional

from ipkey.core.constants import HOLD_THRESHOLD_MAX_SEC, HOLD_THRESHOLD_MIN_SEC
from ipkey.core.logging import LogEntry, LogLevel, get_logger
from ipkey.core.model import Verdict


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ipkey",
        description="Simulate one press of the IP info key.",
    )
    parser.add_argument(
        "--hold",
        type=float,
        default=0.2,
        help="seconds between press and release (default: 0.2)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help=(
            f"hold threshold in seconds, {HOLD_THRESHOLD_MIN_SEC}-"
            f"{HOLD_THRESHOLD_MAX_SEC} in steps of 0.5 (default: keep stored value)"
        ),
    )
    parser.add_argument(
        "--clear-threshold",
        action="store_true",
        help="remove the stored threshold (disables tap/hold classification)",
    )
    parser.add_argument(
        "--context",
        default="default",
        help="key instance identifier used for stored settings",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.name.lower() for level in LogLevel],
        default="info",
        help="minimum log level printed to stderr (default: info)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="do not open the browser on hold",
    )
    return parser.parse_args(argv)


def _print_entry(entry: LogEntry) -> None:
    print(entry.format(), file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = parse_args(argv)

    logger = get_logger()
    logger.set_level(LogLevel[args.log_level.upper()])
    logger.buffer.add_listener(_print_entry)

    # QDesktopServices needs a GUI application; nothing is shown
    if args.no_browser:
        from PySide6.QtCore import QCoreApplication
        app = QCoreApplication(sys.argv[:1])
    else:
        from PySide6.QtGui import QGuiApplication
        app = QGuiApplication(sys.argv[:1])
    app.setApplicationName("ipkey")
    app.setOrganizationName("IPKey")

    from ipkey.controller import ActionController
    from ipkey.core.model import KEY_HOLD_THRESHOLD, GestureSettings
    from ipkey.host import QtHostSink, SettingsStore, SimulatedKeyHost

    store = SettingsStore(args.context)
    if args.threshold is not None or args.clear_threshold:
        record = store.load_record()
        record.pop(KEY_HOLD_THRESHOLD, None)
        if not args.clear_threshold:
            record[KEY_HOLD_THRESHOLD] = args.threshold
        settings = GestureSettings.from_record(record)
        settings.press_started_at = None
        store.save(settings)
        logger.info(f"hold threshold set to {settings.hold_threshold_seconds}")

    host = SimulatedKeyHost(store)
    sink = QtHostSink(store, open_browser=not args.no_browser)
    controller = ActionController(host, sink)
    action = controller.action

    sink.title_changed.connect(lambda text: print(text.replace("\n", "")))

    outcome: dict = {"released": False, "verdict": None}

    def maybe_quit() -> None:
        if outcome["released"] and not action.scheduler.is_busy:
            app.quit()

    def on_classified(verdict: Verdict, duration_ms: int) -> None:
        outcome["released"] = True
        outcome["verdict"] = verdict
        maybe_quit()

    action.gesture_classified.connect(on_classified)
    action.scheduler.refreshed.connect(lambda _value: maybe_quit())
    action.scheduler.refresh_failed.connect(lambda _message: maybe_quit())

    host.play(int(args.hold * 1000))
    app.exec()
    action.scheduler.wait_idle()

    if outcome["verdict"] is not None:
        print(f"gesture: {outcome['verdict'].value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
