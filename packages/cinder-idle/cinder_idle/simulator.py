"""IdleSimulator — closed-form offline accumulation over 15-second cycles."""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable

from cinder import Millis, NarrativeLog, get_value, make_entry, set_value

from cinder_idle.production import population_rates
from cinder_idle.types import (
    SLEEP_INTENSITY_PERCENT,
    SLEEP_LENGTH_HOURS,
    CycleRates,
    IdleProgress,
    IdleSession,
)

if TYPE_CHECKING:
    from cinder import GameState

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000.0


def _pick(table: tuple[float, ...], level: int) -> float:
    return table[max(0, min(level, len(table) - 1))]


def sleep_duration_ms(state: GameState) -> Millis:
    return _pick(SLEEP_LENGTH_HOURS, state.sleep_upgrades.length_level) * MS_PER_HOUR


def sleep_intensity(state: GameState) -> float:
    """Fraction of normal production speed while asleep."""
    return _pick(SLEEP_INTENSITY_PERCENT, state.sleep_upgrades.intensity_level) / 100.0


class IdleSimulator:
    """Accumulates production while the player sleeps.

    Totals are always recomputed from ``start_time`` with one formula,
    ``net_rate * intensity * elapsed / tick``, so ``resume`` and ``tick``
    agree for the same ``now`` no matter how often either is called.
    The durable state model is only touched by ``settle``.
    """

    def __init__(
        self,
        tick_seconds: float = 15.0,
        rates_fn: Callable[[GameState], CycleRates] = population_rates,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be > 0, got {tick_seconds}")
        self._tick_ms = tick_seconds * 1000.0
        self._rates_fn = rates_fn

    @property
    def tick_ms(self) -> Millis:
        return self._tick_ms

    # --- Lifecycle ---

    def start(self, now: Millis, state: GameState) -> IdleSession:
        session = IdleSession(start_time=now)
        self._resolve(session, state)
        session.last_update = now
        logger.info("idle started: %.0f h at %.1f%% speed",
                    session.duration_ms / MS_PER_HOUR, session.intensity * 100)
        return session

    def resume(self, session: IdleSession, now: Millis, state: GameState) -> IdleProgress:
        """Rebuild totals from the durable ``start_time`` after a reload."""
        self._resolve(session, state)
        session.last_update = now
        elapsed = self.elapsed_ms(session, now)
        return IdleProgress(elapsed_seconds=elapsed / 1000.0, accumulated=self._accumulate(session, elapsed))

    def tick(
        self,
        session: IdleSession,
        now: Millis,
        state: GameState,
        previous: dict[str, float] | None = None,
    ) -> dict[str, float]:
        """Totals as of *now*. Returns *previous* unchanged if the clock ran backwards."""
        previous = dict(previous or {})
        if not session.is_active:
            return previous
        if session.rates is None:
            self._resolve(session, state)
        if session.last_update is not None and now < session.last_update:
            logger.debug("idle tick ignored: clock moved backwards")
            return previous
        session.last_update = now
        return self._accumulate(session, self.elapsed_ms(session, now))

    def settle(
        self,
        session: IdleSession,
        accumulated: dict[str, float],
        state: GameState,
        now: Millis | None = None,
        log: NarrativeLog | None = None,
    ) -> GameState:
        """Commit whole units of the totals into *state* once and close the session.

        Totals round toward zero: a partial unit is neither gained nor lost.
        A resource cannot drop below zero; a net loss larger than the stock
        empties it. Settling an inactive session changes nothing.
        """
        if not session.is_active:
            return state
        deltas: dict[str, int] = {}
        for resource, amount in accumulated.items():
            delta = math.trunc(amount)
            if delta == 0:
                continue
            path = f"resources.{resource}"
            set_value(state, path, max(0, get_value(state, path) + delta))
            deltas[resource] = delta
        session.is_active = False
        logger.info("idle settled: %s", deltas or "nothing")
        if log is not None and deltas:
            at = now if now is not None else session.start_time + session.duration_ms
            log.append(make_entry("idle-settle", self.describe(deltas), at, "production"))
        return state

    # --- Queries ---

    def elapsed_ms(self, session: IdleSession, now: Millis) -> Millis:
        """Time asleep so far, capped at the session's maximum duration."""
        return max(0.0, min(now - session.start_time, session.duration_ms))

    def remaining_ms(self, session: IdleSession, now: Millis) -> Millis:
        return max(0.0, session.duration_ms - (now - session.start_time))

    def is_finished(self, session: IdleSession, now: Millis) -> bool:
        return self.remaining_ms(session, now) <= 0

    def next_tick_delay_ms(self, session: IdleSession, now: Millis) -> Millis | None:
        """Delay until the next cycle boundary counted from ``start_time``."""
        if not session.is_active or self.is_finished(session, now):
            return None
        elapsed = max(0.0, now - session.start_time)
        delay = self._tick_ms - (elapsed % self._tick_ms)
        return min(delay, self.remaining_ms(session, now))

    @staticmethod
    def describe(deltas: dict[str, int]) -> str:
        parts = [f"{resource.replace('_', ' ').title()}: {delta:+d}" for resource, delta in deltas.items()]
        return "While you slept, the village worked. " + ", ".join(parts)

    # --- Internals ---

    def _resolve(self, session: IdleSession, state: GameState) -> None:
        session.duration_ms = sleep_duration_ms(state)
        session.intensity = sleep_intensity(state)
        session.rates = self._rates_fn(state)

    def _accumulate(self, session: IdleSession, elapsed_ms: Millis) -> dict[str, float]:
        if session.rates is None:
            return {}
        cycles = elapsed_ms / self._tick_ms
        return {
            resource: rate * session.intensity * cycles
            for resource, rate in session.rates.net().items()
        }
