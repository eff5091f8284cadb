"""Timer state machine for PomoKeeper.

States
------
IDLE        Fresh, unstarted session waiting for ``start``.
RUNNING     Counting down from the anchor.
PAUSED      Frozen; ``start`` resumes the same countdown.
COMPLETED   Countdown reached zero on its own.

Transitions
-----------
IDLE → RUNNING                    (start)
RUNNING → PAUSED                  (pause)
PAUSED → RUNNING                  (start)
RUNNING → COMPLETED               (countdown reaches 0)
RUNNING | PAUSED | COMPLETED → IDLE  (reset)
any → IDLE, next session type     (skip)

Anything else is a silent no-op, so a double-click can never raise.

Design notes
------------
- Remaining time is recomputed from a monotonic anchor by
  :class:`CountdownDriver`; a sleepy event loop cannot make it drift.
- Natural completion is reported once, through ``session_completed``.
  The engine does not move on to the next session by itself.
- A pause/resume cycle keeps the same session id and start time, so the
  history record spans the whole attempt, pauses included.
- Every non-Idle state is persisted; Idle clears the stored state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, pyqtSignal

from .clock import Clock, SystemClock
from .countdown import CountdownDriver, TICK_INTERVAL_MS
from .history import HistoryEmitter, HistorySink
from .models import (
    ActiveSession,
    SessionRecord,
    SessionType,
    TimerState,
    TimerStatus,
    initial_state,
)
from .persistence import StateStore, TimerPersistence
from .scheduler import duration_for, next_session_type, SECONDS_PER_MINUTE

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)


class TimerEngine(QObject):
    """Qt-based Pomodoro countdown with persistence and history output.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted whenever the recomputed remaining time changes.
    state_changed(state: TimerState)
        Emitted with a copy of the state after every mutation.
    session_completed(record: SessionRecord)
        Emitted once when a countdown reaches zero on its own.
    session_recorded(record: SessionRecord)
        Emitted for every record handed to the history sink, including
        interrupted ones.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    session_completed = pyqtSignal(object)
    session_recorded = pyqtSignal(object)

    def __init__(
        self,
        store: StateStore | None = None,
        history_sink: HistorySink | None = None,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        settings: Settings | None = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        self._clock: Clock = clock or SystemClock()
        self._state: TimerState = initial_state()
        self._active: ActiveSession | None = None

        self._history = HistoryEmitter(history_sink, self._clock)
        self._persistence = TimerPersistence(store, self._clock)

        self._driver = CountdownDriver(self._clock, tick_interval_ms, self)
        self._driver.remaining_changed.connect(self._on_remaining_changed)
        self._driver.finished.connect(self._on_finished)

        # ── recovery runs before persistence starts observing ─────────
        recovered = self._persistence.recover()
        if recovered is not None:
            self._state = recovered
        elif settings is not None:
            total = duration_for(SessionType.WORK, settings)
            self._state.remaining_seconds = total
            self._state.total_seconds = total

        self.state_changed.connect(self._persist)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        """A copy of the current state."""
        return self._state.copy()

    @property
    def status(self) -> TimerStatus:
        return self._state.status

    @property
    def session_type(self) -> SessionType:
        return self._state.session_type

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._state.total_seconds

    @property
    def completed_sessions(self) -> int:
        return self._state.completed_sessions

    @property
    def current_task_id(self) -> str | None:
        return self._state.current_task_id

    @property
    def active_session(self) -> ActiveSession | None:
        return self._active

    @property
    def is_running(self) -> bool:
        return self._state.status == TimerStatus.RUNNING

    @property
    def tick_interval_ms(self) -> int:
        return self._driver.interval_ms

    @property
    def progress(self) -> float:
        """0.0 → 1.0 through the current session."""
        total = self._state.total_seconds
        if total <= 0:
            return 0.0
        return (total - self._state.remaining_seconds) / total

    @property
    def progress_percentage(self) -> float:
        return self.progress * 100

    @property
    def formatted_time(self) -> str:
        """Remaining time as zero-padded ``MM:SS``."""
        minutes, seconds = divmod(self._state.remaining_seconds, SECONDS_PER_MINUTE)
        return f"{minutes:02d}:{seconds:02d}"

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def initialize(self, settings: Settings, task_id: str | None = None) -> None:
        """Start over at an unstarted work session with no history.

        An in-flight session is dropped without a record.
        """
        self._driver.stop()
        self._active = None
        total = duration_for(SessionType.WORK, settings)
        self._state = TimerState(
            status=TimerStatus.IDLE,
            session_type=SessionType.WORK,
            remaining_seconds=total,
            total_seconds=total,
            completed_sessions=0,
            current_task_id=task_id,
        )
        self._notify()

    def start(self, settings: Settings) -> None:
        """Begin the current session from IDLE, or resume from PAUSED."""
        status = self._state.status
        if status == TimerStatus.IDLE:
            total = duration_for(self._state.session_type, settings)
            self._state.total_seconds = total
            self._state.remaining_seconds = total
        elif status != TimerStatus.PAUSED:
            return

        if self._active is None:
            self._active = self._history.begin()

        anchor = self._clock.now_monotonic_ms()
        self._state.status = TimerStatus.RUNNING
        self._state.session_start_anchor = anchor
        self._driver.start(self._state.remaining_seconds, anchor)

        logger.info(
            f"{'Started' if status == TimerStatus.IDLE else 'Resumed'} "
            f"{self._state.session_type.value} session {self._active.session_id} "
            f"with {self._state.remaining_seconds}s left"
        )
        self._notify()

    def pause(self) -> None:
        """Freeze the countdown.  The session stays in flight."""
        self._catch_up()
        if self._state.status != TimerStatus.RUNNING:
            return
        self._state.remaining_seconds = self._driver.last_remaining
        self._driver.stop()
        self._state.status = TimerStatus.PAUSED
        self._state.session_start_anchor = None
        self._notify()

    def reset(self, settings: Settings | None = None) -> None:
        """Abandon the current session and return to its Idle baseline.

        With *settings* the baseline uses the configured duration for the
        current session type; without, the current total is kept.
        """
        self._catch_up()
        self._driver.stop()
        before = self._state.copy()

        self._record_interrupted()
        if settings is not None:
            total = duration_for(self._state.session_type, settings)
        else:
            total = self._state.total_seconds
        self._state.status = TimerStatus.IDLE
        self._state.remaining_seconds = total
        self._state.total_seconds = total
        self._state.session_start_anchor = None
        self._persistence.clear()

        if self._state != before:
            logger.info(f"Reset {self._state.session_type.value} session")
            self._notify()

    def skip(self, settings: Settings) -> None:
        """Move to the next session type without counting a completion.

        Always lands on an unstarted (IDLE) session.
        """
        self._catch_up()
        self._driver.stop()
        self._record_interrupted()

        # A COMPLETED work session is already in the count.
        completed_after = self._state.completed_sessions
        if self._state.status != TimerStatus.COMPLETED:
            completed_after += 1
        upcoming = next_session_type(
            self._state.session_type,
            completed_after,
            settings.sessions_before_long_break,
        )

        total = duration_for(upcoming, settings)
        logger.info(
            f"Skipped {self._state.session_type.value} → {upcoming.value}"
        )
        self._state.session_type = upcoming
        self._state.status = TimerStatus.IDLE
        self._state.remaining_seconds = total
        self._state.total_seconds = total
        self._state.session_start_anchor = None
        self._notify()

    def set_task_id(self, task_id: str | None) -> None:
        self._state.current_task_id = task_id
        self._notify()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — countdown
    # ══════════════════════════════════════════════════════════════════

    def _catch_up(self) -> None:
        """Apply time that passed since the last tick before acting."""
        if self._state.status == TimerStatus.RUNNING:
            self._driver.poll()

    def _on_remaining_changed(self, remaining: int) -> None:
        if self._state.status != TimerStatus.RUNNING:
            return
        self._state.remaining_seconds = remaining
        self.tick.emit(remaining)
        self._notify()

    def _on_finished(self) -> None:
        if self._state.status != TimerStatus.RUNNING:
            return

        record = self._history.emit(self._active, self._state, interrupted=False)
        self._active = None

        if self._state.session_type == SessionType.WORK:
            self._state.completed_sessions += 1
        self._state.remaining_seconds = 0
        self._state.status = TimerStatus.COMPLETED
        self._state.session_start_anchor = None

        logger.info(
            f"Completed {self._state.session_type.value} session "
            f"({self._state.completed_sessions} work sessions so far)"
        )
        self.tick.emit(0)
        self._notify()
        if record is not None:
            self.session_recorded.emit(record)
            self.session_completed.emit(record)

    def _record_interrupted(self) -> SessionRecord | None:
        record = self._history.emit(self._active, self._state, interrupted=True)
        self._active = None
        if record is not None:
            self.session_recorded.emit(record)
        return record

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — observation & persistence
    # ══════════════════════════════════════════════════════════════════

    def _notify(self) -> None:
        self.state_changed.emit(self._state.copy())

    def _persist(self, state: TimerState) -> None:
        if state.status == TimerStatus.IDLE:
            self._persistence.clear()
            return
        if state.status == TimerStatus.RUNNING and self._driver.is_ticking:
            # Stored remaining time pairs with the anchor, not the last tick.
            state = state.copy()
            state.remaining_seconds = self._driver.remaining_at_anchor
            state.session_start_anchor = self._driver.anchor_ms
        self._persistence.save(state)
