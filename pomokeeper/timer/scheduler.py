"""Pomodoro cycle rules: session durations and rotation order."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import SessionType

if TYPE_CHECKING:
    from ..settings import Settings


SECONDS_PER_MINUTE = 60


def duration_for(session_type: SessionType, settings: Settings) -> int:
    """Configured length of *session_type* in seconds."""
    minutes = {
        SessionType.WORK: settings.work_minutes,
        SessionType.SHORT_BREAK: settings.short_break_minutes,
        SessionType.LONG_BREAK: settings.long_break_minutes,
    }[session_type]
    return int(minutes * SECONDS_PER_MINUTE)


def next_session_type(
    current_type: SessionType,
    completed_sessions_after_this_one: int,
    sessions_before_long_break: int,
) -> SessionType:
    """What follows *current_type* in the cycle.

    Any break is followed by work.  Work is followed by a long break when
    the work-session count (including the one just ending) is a multiple
    of *sessions_before_long_break*, otherwise by a short break.

    *sessions_before_long_break* must be >= 1; settings validation rejects
    anything else before it gets here.
    """
    assert sessions_before_long_break >= 1, "sessions_before_long_break must be >= 1"

    if current_type.is_break:
        return SessionType.WORK
    if completed_sessions_after_this_one % sessions_before_long_break == 0:
        return SessionType.LONG_BREAK
    return SessionType.SHORT_BREAK
