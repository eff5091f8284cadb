"""Drift-corrected countdown driver.

The driver never decrements a counter.  Every tick recomputes the
remaining time from the anchor::

    remaining = max(0, remaining_at_anchor - floor((now - anchor) / 1000))

so late, missed, or irregular ``QTimer`` callbacks cannot accumulate
error.  The tick interval only controls how quickly a change is noticed.
"""

from __future__ import annotations

import math

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .clock import Clock, SystemClock


TICK_INTERVAL_MS = 100
MS_PER_SECOND = 1000


def remaining_from_anchor(
    remaining_at_anchor: int, anchor_ms: float, now_ms: float
) -> int:
    """Remaining whole seconds at *now_ms* for a countdown anchored at
    *anchor_ms*.  A clock reading before the anchor counts as no time
    elapsed."""
    elapsed_ms = max(0.0, now_ms - anchor_ms)
    elapsed_seconds = math.floor(elapsed_ms / MS_PER_SECOND)
    return max(0, remaining_at_anchor - elapsed_seconds)


class CountdownDriver(QObject):
    """Owns the repeating tick for one countdown at a time.

    Signals
    -------
    remaining_changed(remaining_seconds: int)
        Emitted when a recompute yields a new non-zero value.
    finished()
        Emitted once, when the value first reaches 0 after being > 0
        (instead of ``remaining_changed``).  The driver has already
        stopped when this fires.
    """

    remaining_changed = pyqtSignal(int)
    finished = pyqtSignal()

    def __init__(
        self,
        clock: Clock | None = None,
        interval_ms: int = TICK_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock = clock or SystemClock()
        self._anchor_ms: float | None = None
        self._remaining_at_anchor: int = 0
        self._last_remaining: int = 0

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self.poll)

    # ── properties ────────────────────────────────────────────────────

    @property
    def is_ticking(self) -> bool:
        return self._anchor_ms is not None

    @property
    def anchor_ms(self) -> float | None:
        return self._anchor_ms

    @property
    def remaining_at_anchor(self) -> int:
        return self._remaining_at_anchor

    @property
    def last_remaining(self) -> int:
        return self._last_remaining

    @property
    def interval_ms(self) -> int:
        return self._qt_timer.interval()

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        self._qt_timer.setInterval(value)

    # ── control ───────────────────────────────────────────────────────

    def start(self, remaining_seconds: int, anchor_ms: float | None = None) -> None:
        """Anchor the countdown at *remaining_seconds* and begin ticking.

        A second call while already ticking is ignored.
        """
        if self.is_ticking:
            return
        if anchor_ms is None:
            anchor_ms = self._clock.now_monotonic_ms()
        self._anchor_ms = anchor_ms
        self._remaining_at_anchor = max(0, int(remaining_seconds))
        self._last_remaining = self._remaining_at_anchor
        self._qt_timer.start()

    def stop(self) -> None:
        self._qt_timer.stop()
        self._anchor_ms = None

    def remaining_at(self, now_ms: float) -> int:
        if self._anchor_ms is None:
            return self._last_remaining
        return remaining_from_anchor(
            self._remaining_at_anchor, self._anchor_ms, now_ms
        )

    def poll(self) -> int:
        """Run one tick against the clock and return the remaining time."""
        if not self.is_ticking:
            return self._last_remaining

        previous = self._last_remaining
        current = self.remaining_at(self._clock.now_monotonic_ms())
        if current == previous:
            return current

        self._last_remaining = current
        if current == 0 and previous > 0:
            self.stop()
            self.finished.emit()
        else:
            self.remaining_changed.emit(current)
        return current
