"""Data model for the PomoKeeper timer.

``TimerState`` is the single mutable record the engine owns.
``SessionRecord`` is the immutable receipt handed to the history sink
whenever a session ends, naturally or not.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from enum import Enum


# ── enums ─────────────────────────────────────────────────────────────────


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class SessionType(Enum):
    WORK = "work"
    SHORT_BREAK = "short-break"
    LONG_BREAK = "long-break"

    @property
    def is_break(self) -> bool:
        return self is not SessionType.WORK


# ── timer state ───────────────────────────────────────────────────────────


@dataclass
class TimerState:
    """Authoritative countdown state.

    ``session_start_anchor`` is a monotonic timestamp in milliseconds and
    is only set while RUNNING.
    """

    status: TimerStatus = TimerStatus.IDLE
    session_type: SessionType = SessionType.WORK
    remaining_seconds: int = 0
    total_seconds: int = 0
    completed_sessions: int = 0
    current_task_id: str | None = None
    session_start_anchor: float | None = None

    def copy(self) -> TimerState:
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "session_type": self.session_type.value,
            "remaining_seconds": self.remaining_seconds,
            "total_seconds": self.total_seconds,
            "completed_sessions": self.completed_sessions,
            "current_task_id": self.current_task_id,
            "session_start_anchor": self.session_start_anchor,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TimerState:
        """Rebuild a state from :meth:`to_dict` output.

        Raises ``KeyError``, ``ValueError`` or ``TypeError`` on malformed
        input.
        """
        anchor = data.get("session_start_anchor")
        task_id = data.get("current_task_id")
        state = cls(
            status=TimerStatus(data["status"]),
            session_type=SessionType(data["session_type"]),
            remaining_seconds=int(data["remaining_seconds"]),
            total_seconds=int(data["total_seconds"]),
            completed_sessions=int(data.get("completed_sessions", 0)),
            current_task_id=str(task_id) if task_id is not None else None,
            session_start_anchor=float(anchor) if anchor is not None else None,
        )
        if state.remaining_seconds < 0 or state.total_seconds < 0:
            raise ValueError("negative durations in persisted timer state")
        if state.remaining_seconds > state.total_seconds:
            raise ValueError("remaining time exceeds session length")
        if state.completed_sessions < 0:
            raise ValueError("negative completed session count")
        return state


def initial_state() -> TimerState:
    """The Idle baseline used before any settings are applied."""
    return TimerState()


# ── session tracking ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class ActiveSession:
    """Identity of the in-flight session (never persisted)."""

    session_id: str
    started_at: str  # ISO-8601 wall clock


@dataclass(frozen=True)
class SessionRecord:
    """One finished or abandoned session."""

    id: str
    task_id: str | None
    type: SessionType
    started_at: str
    ended_at: str
    duration_seconds: int
    interrupted: bool

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = self.type.value
        return data
