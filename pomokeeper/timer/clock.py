"""Time sources.

The engine measures intervals with a monotonic clock and stamps records
with the wall clock.  ``FakeClock`` lets tests and simulations drive both
by hand.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone


class Clock:
    """Interface: monotonic milliseconds plus an ISO-8601 wall clock."""

    def now_monotonic_ms(self) -> float:
        raise NotImplementedError

    def now_wall_clock_iso(self) -> str:
        raise NotImplementedError


class SystemClock(Clock):

    def now_monotonic_ms(self) -> float:
        return time.monotonic() * 1000.0

    def now_wall_clock_iso(self) -> str:
        return datetime.now(timezone.utc).isoformat()


class FakeClock(Clock):
    """Manually advanced clock.  ``advance`` moves both time bases."""

    def __init__(
        self,
        monotonic_ms: float = 0.0,
        wall: datetime | None = None,
    ) -> None:
        self._monotonic_ms = monotonic_ms
        self._wall = wall or datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

    def now_monotonic_ms(self) -> float:
        return self._monotonic_ms

    def now_wall_clock_iso(self) -> str:
        return self._wall.isoformat()

    def advance(self, ms: float) -> None:
        self._monotonic_ms += ms
        self._wall += timedelta(milliseconds=ms)

    def advance_seconds(self, seconds: float) -> None:
        self.advance(seconds * 1000.0)

    def set_monotonic(self, ms: float) -> None:
        """Jump only the monotonic clock (e.g. to simulate a restart)."""
        self._monotonic_ms = ms
