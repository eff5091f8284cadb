"""Allow running PomoKeeper as a module: python -m pomokeeper [task-id].

Runs the current session headlessly on a Qt event loop, printing the
remaining time once a second until the countdown completes.  A session
left running or paused by a previous run is picked up where it stopped.
"""

import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from .database import KeyValueStore, SessionHistory, init_db
from .settings import load_settings
from .timer import TimerEngine, TimerStatus


def quit_on_interrupt(app) -> None:
    """Make Ctrl+C leave the Qt loop normally so a running session gets
    paused.  Python only sees the signal when a slot runs, which the
    one-second display timer guarantees."""
    signal.signal(signal.SIGINT, lambda *_: app.quit())


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    app = QCoreApplication(sys.argv)
    app.setApplicationName("PomoKeeper")
    app.setOrganizationName("PomoKeeper")

    settings = load_settings()
    engine = TimerEngine(KeyValueStore(), SessionHistory(), settings=settings)

    args = app.arguments()[1:]
    if args:
        engine.set_task_id(args[0])

    if engine.status == TimerStatus.COMPLETED:
        engine.skip(settings)

    def show() -> None:
        print(f"\r{engine.session_type.value:>11}  {engine.formatted_time}", end="", flush=True)

    def on_completed(record) -> None:
        print()
        print(f"Session complete: {record.to_dict()}")
        app.quit()

    display = QTimer()
    display.setInterval(1000)
    display.timeout.connect(show)
    engine.session_completed.connect(on_completed)

    quit_on_interrupt(app)

    engine.start(settings)
    show()
    display.start()

    exit_code = app.exec()
    if engine.status == TimerStatus.RUNNING:
        engine.pause()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
