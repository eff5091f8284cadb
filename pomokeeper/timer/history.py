"""Turns an ended session into a ``SessionRecord`` for the history sink."""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime
from typing import Protocol

from .clock import Clock
from .models import ActiveSession, SessionRecord, TimerState

logger = logging.getLogger(__name__)


class HistorySink(Protocol):
    def add_session(self, record: SessionRecord) -> None: ...


def _seconds_between(started_at: str, ended_at: str) -> int:
    delta = datetime.fromisoformat(ended_at) - datetime.fromisoformat(started_at)
    return max(0, math.floor(delta.total_seconds()))


class HistoryEmitter:

    def __init__(self, sink: HistorySink | None, clock: Clock) -> None:
        self._sink = sink
        self._clock = clock

    def begin(self) -> ActiveSession:
        """Open tracking for a new in-flight session."""
        return ActiveSession(
            session_id=uuid.uuid4().hex,
            started_at=self._clock.now_wall_clock_iso(),
        )

    def emit(
        self,
        active: ActiveSession | None,
        state: TimerState,
        interrupted: bool,
    ) -> SessionRecord | None:
        """Close *active* and hand the record to the sink.

        Returns ``None`` when nothing was in flight.  Sink failures are
        logged and otherwise ignored.
        """
        if active is None:
            return None

        ended_at = self._clock.now_wall_clock_iso()
        record = SessionRecord(
            id=active.session_id,
            task_id=state.current_task_id,
            type=state.session_type,
            started_at=active.started_at,
            ended_at=ended_at,
            duration_seconds=_seconds_between(active.started_at, ended_at),
            interrupted=interrupted,
        )

        if self._sink is not None:
            try:
                self._sink.add_session(record)
            except Exception:
                logger.exception(f"History sink rejected session {record.id}")
        return record
