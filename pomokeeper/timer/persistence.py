"""Saving the timer state and reconciling it after a restart.

Only non-Idle states are written.  ``reset`` removes the key instead of
writing an Idle state, so "nothing stored" and "Idle" mean the same thing.

Recovery never resumes a countdown on its own.  A snapshot taken while
RUNNING is advanced by the time that passed since its anchor and then
parked as PAUSED, or as COMPLETED once the time has run out.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .clock import Clock
from .countdown import remaining_from_anchor
from .models import TimerState, TimerStatus

logger = logging.getLogger(__name__)

TIMER_STATE_STORAGE_KEY = "timer_state"


class StateStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> bool: ...
    def remove(self, key: str) -> None: ...


class TimerPersistence:

    def __init__(
        self,
        store: StateStore | None,
        clock: Clock,
        key: str = TIMER_STATE_STORAGE_KEY,
    ) -> None:
        self._store = store
        self._clock = clock
        self._key = key
        self._loading = False
        self._last_saved: dict | None = None

    @property
    def is_loading(self) -> bool:
        return self._loading

    def save(self, state: TimerState) -> None:
        """Write *state* unless it is Idle.  Failures are logged only."""
        if self._store is None or self._loading:
            return
        if state.status == TimerStatus.IDLE:
            return
        data = state.to_dict()
        if data == self._last_saved:
            return
        try:
            ok = self._store.set(self._key, data)
        except Exception:
            logger.exception("Failed to persist timer state")
            return
        if ok is False:
            logger.warning("Timer state was not persisted")
            return
        self._last_saved = data

    def clear(self) -> None:
        self._last_saved = None
        if self._store is None:
            return
        try:
            self._store.remove(self._key)
        except Exception:
            logger.exception("Failed to clear persisted timer state")

    def recover(self) -> TimerState | None:
        """Rebuild the last saved state, or ``None`` to start fresh.

        A reconciled state that differs from what was stored is written
        back, so a second restart does not reconcile the same snapshot
        again.
        """
        if self._store is None:
            return None

        self._loading = True
        try:
            raw = self._store.get(self._key)
            if raw is None:
                return None
            state = TimerState.from_dict(raw)
        except (KeyError, ValueError, TypeError, AttributeError):
            logger.warning("Discarding unreadable persisted timer state")
            return None
        except Exception:
            logger.exception("Failed to read persisted timer state")
            return None
        finally:
            self._loading = False

        stored = state.to_dict()
        recovered = self.reconcile(state)
        if recovered is None:
            self.clear()
        elif recovered.to_dict() != stored:
            self.save(recovered)
        else:
            self._last_saved = stored
        return recovered

    def reconcile(self, state: TimerState) -> TimerState | None:
        if state.status == TimerStatus.IDLE:
            return None

        if state.status == TimerStatus.RUNNING:
            if state.session_start_anchor is not None:
                state.remaining_seconds = remaining_from_anchor(
                    state.remaining_seconds,
                    state.session_start_anchor,
                    self._clock.now_monotonic_ms(),
                )
            state.session_start_anchor = None
            if state.remaining_seconds > 0:
                state.status = TimerStatus.PAUSED
            else:
                state.status = TimerStatus.COMPLETED
            logger.info(
                f"Recovered running {state.session_type.value} session as "
                f"{state.status.value} with {state.remaining_seconds}s left"
            )
            return state

        state.session_start_anchor = None
        if state.status == TimerStatus.COMPLETED or state.remaining_seconds == 0:
            # A paused countdown with nothing left has already finished.
            state.status = TimerStatus.COMPLETED
            state.remaining_seconds = 0
        logger.info(f"Recovered {state.status.value} {state.session_type.value} session")
        return state
