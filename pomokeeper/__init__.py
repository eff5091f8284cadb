"""PomoKeeper: a restart-safe Pomodoro timer."""

__version__ = "0.1.0"
