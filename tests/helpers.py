"""Shared test helpers for PomoKeeper."""

from pomokeeper.timer import FakeClock, TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class ListSink:
    """History sink that keeps records in memory."""

    def __init__(self):
        self.records: list = []

    def add_session(self, record):
        self.records.append(record)


class BrokenStore:
    """Store whose every operation fails."""

    def get(self, key, default=None):
        raise OSError("disk on fire")

    def set(self, key, value):
        raise OSError("disk on fire")

    def remove(self, key):
        raise OSError("disk on fire")


def advance(engine: TimerEngine, clock: FakeClock, seconds: float, step_ms: float = 100) -> None:
    """Move the clock forward *seconds*, ticking every *step_ms*."""
    remaining_ms = seconds * 1000
    while remaining_ms > 0:
        step = min(step_ms, remaining_ms)
        clock.advance(step)
        engine._driver.poll()
        remaining_ms -= step


def complete_session(engine: TimerEngine, clock: FakeClock) -> None:
    """Fast-complete the current running session with a single jump."""
    clock.advance_seconds(engine.remaining_seconds)
    engine._driver.poll()
