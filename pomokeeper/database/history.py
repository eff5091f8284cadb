"""Session history: the append-only sink the timer emits records into."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from ..timer.models import SessionRecord, SessionType
from .db import get_session
from .models import SessionRecordRow

logger = logging.getLogger(__name__)

MAX_HISTORY_RECORDS = 1000


def _to_record(row: SessionRecordRow) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        task_id=row.task_id,
        type=SessionType(row.session_type),
        started_at=row.started_at,
        ended_at=row.ended_at,
        duration_seconds=row.duration_seconds,
        interrupted=row.interrupted,
    )


class SessionHistory:
    """SQLite-backed history, oldest first, capped at *max_records*."""

    def __init__(self, max_records: int = MAX_HISTORY_RECORDS) -> None:
        self._max_records = max_records

    def add_session(self, record: SessionRecord) -> None:
        with get_session() as db:
            db.add(SessionRecordRow(
                id=record.id,
                task_id=record.task_id,
                session_type=record.type.value,
                started_at=record.started_at,
                ended_at=record.ended_at,
                duration_seconds=record.duration_seconds,
                interrupted=record.interrupted,
            ))
            db.flush()

            overflow = db.query(SessionRecordRow).count() - self._max_records
            if overflow > 0:
                oldest = (
                    db.query(SessionRecordRow.seq)
                    .order_by(SessionRecordRow.seq)
                    .limit(overflow)
                    .all()
                )
                db.query(SessionRecordRow).filter(
                    SessionRecordRow.seq.in_([seq for (seq,) in oldest])
                ).delete(synchronize_session=False)
        logger.debug(f"Recorded {record.type.value} session {record.id}")

    def all_sessions(self) -> list[SessionRecord]:
        with get_session() as db:
            rows = db.query(SessionRecordRow).order_by(SessionRecordRow.seq).all()
            return [_to_record(r) for r in rows]

    def today_sessions(self, today: date | None = None) -> list[SessionRecord]:
        """Sessions whose start falls on *today* (UTC date prefix)."""
        today = today or datetime.now(timezone.utc).date()
        with get_session() as db:
            rows = (
                db.query(SessionRecordRow)
                .filter(SessionRecordRow.started_at.startswith(today.isoformat()))
                .order_by(SessionRecordRow.seq)
                .all()
            )
            return [_to_record(r) for r in rows]

    def sessions_between(self, start: datetime, end: datetime) -> list[SessionRecord]:
        """Sessions started within [*start*, *end*], compared as instants."""
        return [
            r for r in self.all_sessions()
            if start <= datetime.fromisoformat(r.started_at) <= end
        ]

    def sessions_for_task(self, task_id: str) -> list[SessionRecord]:
        with get_session() as db:
            rows = (
                db.query(SessionRecordRow)
                .filter(SessionRecordRow.task_id == task_id)
                .order_by(SessionRecordRow.seq)
                .all()
            )
            return [_to_record(r) for r in rows]

    def undo_last_session(self) -> SessionRecord | None:
        """Remove and return the most recent record, if any."""
        with get_session() as db:
            row = (
                db.query(SessionRecordRow)
                .order_by(SessionRecordRow.seq.desc())
                .first()
            )
            if row is None:
                return None
            record = _to_record(row)
            db.delete(row)
        return record

    def clear(self) -> None:
        with get_session() as db:
            db.query(SessionRecordRow).delete(synchronize_session=False)
