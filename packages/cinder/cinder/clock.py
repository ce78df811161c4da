"""Wall-clock sources. All timestamps are epoch milliseconds."""

from __future__ import annotations

import time

from cinder.types import Millis


class WallClock:
    def now(self) -> Millis:
        return time.time() * 1000.0


class ManualClock:
    """Settable clock for tests and replays."""

    def __init__(self, start: Millis = 0.0) -> None:
        self._now = start

    def now(self) -> Millis:
        return self._now

    def set(self, now: Millis) -> None:
        self._now = now

    def advance(self, ms: Millis) -> Millis:
        if ms < 0:
            raise ValueError(f"cannot advance by a negative amount, got {ms}")
        self._now += ms
        return self._now
