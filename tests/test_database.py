"""Tests for the SQLite-backed key-value store and session history."""

import pytest
from datetime import date, datetime, timezone

from pomokeeper.database import (
    KeyValueStore, SessionHistory, get_session, KeyValueEntry,
)
from pomokeeper.timer import (
    SessionRecord, SessionType, TimerStatus, TIMER_STATE_STORAGE_KEY,
)

from helpers import advance, complete_session


def make_record(n, task_id=None, started_at=None, interrupted=False):
    started_at = started_at or f"2024-03-0{n % 9 + 1}T10:00:00+00:00"
    return SessionRecord(
        id=f"rec-{n}",
        task_id=task_id,
        type=SessionType.WORK,
        started_at=started_at,
        ended_at=started_at,
        duration_seconds=60,
        interrupted=interrupted,
    )


# ═══════════════════════════════════════════════════════════════════════════
#  KEY-VALUE STORE
# ═══════════════════════════════════════════════════════════════════════════


class TestKeyValueStore:

    def test_set_and_get_round_trip(self):
        store = KeyValueStore()
        assert store.set("timer_state", {"status": "paused", "n": 3}) is True
        assert store.get("timer_state") == {"status": "paused", "n": 3}

    def test_overwrite(self):
        store = KeyValueStore()
        store.set("k", 1)
        store.set("k", 2)
        assert store.get("k") == 2

    def test_missing_key_returns_default(self):
        store = KeyValueStore()
        assert store.get("nope") is None
        assert store.get("nope", 5) == 5

    def test_keys_are_prefixed(self):
        KeyValueStore().set("settings", {"a": 1})
        with get_session() as db:
            assert db.get(KeyValueEntry, "pomodoro_settings") is not None

    def test_remove_and_has(self):
        store = KeyValueStore()
        store.set("k", [1, 2])
        assert store.has("k")
        store.remove("k")
        assert not store.has("k")
        store.remove("k")  # removing twice is fine

    def test_unserialisable_value_is_swallowed(self):
        store = KeyValueStore()
        assert store.set("k", object()) is False
        assert store.get("k") is None

    def test_corrupt_value_reads_as_default(self):
        with get_session() as db:
            db.add(KeyValueEntry(key="pomodoro_bad", value="{not json"))
        assert KeyValueStore().get("bad", "fallback") == "fallback"

    def test_clear_only_touches_own_prefix(self):
        mine = KeyValueStore()
        other = KeyValueStore(prefix="other_")
        mine.set("a", 1)
        mine.set("b", 2)
        other.set("a", 3)
        mine.clear()
        assert not mine.has("a")
        assert not mine.has("b")
        assert other.get("a") == 3


# ═══════════════════════════════════════════════════════════════════════════
#  SESSION HISTORY
# ═══════════════════════════════════════════════════════════════════════════


class TestSessionHistory:

    def test_add_and_list_in_emission_order(self):
        history = SessionHistory()
        for n in (3, 1, 2):
            history.add_session(make_record(n))
        assert [r.id for r in history.all_sessions()] == ["rec-3", "rec-1", "rec-2"]

    def test_round_trip_preserves_fields(self):
        history = SessionHistory()
        original = SessionRecord(
            id="abc", task_id="t9", type=SessionType.LONG_BREAK,
            started_at="2024-01-01T09:00:00+00:00",
            ended_at="2024-01-01T09:15:00+00:00",
            duration_seconds=900, interrupted=True,
        )
        history.add_session(original)
        assert history.all_sessions() == [original]

    def test_capped_at_max_records(self):
        history = SessionHistory(max_records=3)
        for n in range(5):
            history.add_session(make_record(n))
        assert [r.id for r in history.all_sessions()] == ["rec-2", "rec-3", "rec-4"]

    def test_sessions_for_task(self):
        history = SessionHistory()
        history.add_session(make_record(1, task_id="a"))
        history.add_session(make_record(2, task_id="b"))
        history.add_session(make_record(3, task_id="a"))
        assert [r.id for r in history.sessions_for_task("a")] == ["rec-1", "rec-3"]

    def test_today_sessions(self):
        history = SessionHistory()
        history.add_session(make_record(1, started_at="2024-05-01T08:00:00+00:00"))
        history.add_session(make_record(2, started_at="2024-05-02T08:00:00+00:00"))
        assert [r.id for r in history.today_sessions(date(2024, 5, 2))] == ["rec-2"]

    def test_sessions_between(self):
        history = SessionHistory()
        history.add_session(make_record(1, started_at="2024-05-01T08:00:00+00:00"))
        history.add_session(make_record(2, started_at="2024-05-03T08:00:00+00:00"))
        history.add_session(make_record(3, started_at="2024-05-05T08:00:00+00:00"))
        found = history.sessions_between(
            datetime(2024, 5, 2, tzinfo=timezone.utc),
            datetime(2024, 5, 4, tzinfo=timezone.utc),
        )
        assert [r.id for r in found] == ["rec-2"]

    def test_undo_last_session(self):
        history = SessionHistory()
        history.add_session(make_record(1))
        history.add_session(make_record(2))
        undone = history.undo_last_session()
        assert undone.id == "rec-2"
        assert [r.id for r in history.all_sessions()] == ["rec-1"]

    def test_undo_on_empty_history(self):
        assert SessionHistory().undo_last_session() is None

    def test_clear(self):
        history = SessionHistory()
        history.add_session(make_record(1))
        history.clear()
        assert history.all_sessions() == []


# ═══════════════════════════════════════════════════════════════════════════
#  ENGINE ON THE REAL DATABASE
# ═══════════════════════════════════════════════════════════════════════════


class TestEngineWithDatabase:

    def test_completed_session_lands_in_history(self, engine_db, settings, clock):
        engine_db.set_task_id("write-report")
        engine_db.start(settings)
        complete_session(engine_db, clock)

        records = SessionHistory().all_sessions()
        assert len(records) == 1
        assert records[0].task_id == "write-report"
        assert records[0].interrupted is False
        assert records[0].duration_seconds == 25 * 60

    def test_state_survives_engine_restart(self, engine_db, settings, clock, qapp):
        from pomokeeper.timer import TimerEngine

        engine_db.start(settings)
        advance(engine_db, clock, 20)
        engine_db.pause()

        again = TimerEngine(KeyValueStore(), SessionHistory(), clock=clock, settings=settings)
        assert again.status == TimerStatus.PAUSED
        assert again.remaining_seconds == 25 * 60 - 20

    def test_reset_clears_stored_state(self, engine_db, settings):
        engine_db.start(settings)
        assert KeyValueStore().has(TIMER_STATE_STORAGE_KEY)
        engine_db.reset()
        assert not KeyValueStore().has(TIMER_STATE_STORAGE_KEY)
        assert len(SessionHistory().all_sessions()) == 1
