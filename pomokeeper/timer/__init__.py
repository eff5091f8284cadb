"""Timer package."""

from .clock import Clock, SystemClock, FakeClock
from .countdown import CountdownDriver, TICK_INTERVAL_MS, remaining_from_anchor
from .engine import TimerEngine
from .history import HistoryEmitter
from .models import (
    ActiveSession,
    SessionRecord,
    SessionType,
    TimerState,
    TimerStatus,
    initial_state,
)
from .persistence import TimerPersistence, TIMER_STATE_STORAGE_KEY
from .scheduler import duration_for, next_session_type

__all__ = [
    "Clock",
    "SystemClock",
    "FakeClock",
    "CountdownDriver",
    "TICK_INTERVAL_MS",
    "remaining_from_anchor",
    "TimerEngine",
    "HistoryEmitter",
    "ActiveSession",
    "SessionRecord",
    "SessionType",
    "TimerState",
    "TimerStatus",
    "initial_state",
    "TimerPersistence",
    "TIMER_STATE_STORAGE_KEY",
    "duration_for",
    "next_session_type",
]
