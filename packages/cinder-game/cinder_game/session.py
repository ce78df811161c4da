"""GameSession - one running game: state, cooldowns, log, combat and sleep."""
from __future__ import annotations

import logging
import os
import random
from typing import Any, Callable, Protocol

from cinder import (
    CinderConfig,
    GameState,
    InvariantPolicy,
    Millis,
    NarrativeLog,
    SnapshotError,
    WallClock,
)
from cinder_action import (
    ActionExecutor,
    ActionRegistry,
    CooldownTracker,
    ExecutionResult,
    assign_villager,
    available_roles,
    default_registry,
    unassign_villager,
)
from cinder_combat import CombatResolver, CombatSession, Enemy
from cinder_idle import CycleRates, IdleProgress, IdleSession, IdleSimulator, population_rates

logger = logging.getLogger(__name__)

_SNAPSHOT_VERSION = 1


class Clock(Protocol):
    def now(self) -> Millis: ...


class GameSession:
    """Owns the state model and every tracker that reads or writes it.

    All calls are synchronous. ``now`` defaults to the session clock.
    """

    def __init__(
        self,
        config: CinderConfig | None = None,
        registry: ActionRegistry | None = None,
        clock: Clock | None = None,
        seed: int | None = None,
        rates_fn: Callable[[GameState], CycleRates] = population_rates,
    ) -> None:
        self._config = config if config is not None else CinderConfig()
        self._registry = registry if registry is not None else default_registry()
        self._clock = clock if clock is not None else WallClock()

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

        self._policy = InvariantPolicy(strict=self._config.strict)
        self._state = GameState()
        self._cooldowns = CooldownTracker()
        self._log = NarrativeLog(self._config.log_capacity)
        self._executor = ActionExecutor(self._registry, self._cooldowns, self._policy, self._rng)
        self._combat = CombatResolver(
            rng=self._rng,
            policy=self._policy,
            critical_multiplier=self._config.critical_multiplier,
        )
        self._idle = IdleSimulator(self._config.idle_tick_seconds, rates_fn)
        self._idle_session: IdleSession | None = None
        self._idle_totals: dict[str, float] = {}

    @property
    def config(self) -> CinderConfig:
        return self._config

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def cooldowns(self) -> CooldownTracker:
        return self._cooldowns

    @property
    def log(self) -> NarrativeLog:
        return self._log

    @property
    def executor(self) -> ActionExecutor:
        return self._executor

    @property
    def combat(self) -> CombatResolver:
        return self._combat

    @property
    def idle(self) -> IdleSimulator:
        return self._idle

    @property
    def idle_session(self) -> IdleSession | None:
        return self._idle_session

    @property
    def idle_totals(self) -> dict[str, float]:
        return dict(self._idle_totals)

    @property
    def seed(self) -> int:
        return self._seed

    def _now(self, now: Millis | None) -> Millis:
        return self._clock.now() if now is None else now

    # --- Actions ---

    def can_execute(self, action_id: str, now: Millis | None = None) -> bool:
        return self._executor.can_execute(action_id, self._state, self._now(now))

    def execute(self, action_id: str, now: Millis | None = None) -> ExecutionResult:
        result = self._executor.execute(action_id, self._state, self._now(now))
        self._log.extend(result.log_entries)
        return result

    def visible_actions(self) -> list[str]:
        return self._executor.visible_actions(self._state)

    # --- Villagers ---

    def assign_villager(self, role: str) -> bool:
        return assign_villager(self._state, role)

    def unassign_villager(self, role: str) -> bool:
        return unassign_villager(self._state, role)

    def available_roles(self) -> list[str]:
        return available_roles(self._state)

    # --- Combat ---

    def start_combat(
        self,
        enemy: Enemy,
        on_victory: Callable[[CombatSession], None] | None = None,
        on_defeat: Callable[[CombatSession], None] | None = None,
    ) -> CombatSession:
        """Open a fight. The session lives only as long as the caller holds it."""
        return self._combat.start(enemy, self._state, on_victory, on_defeat)

    # --- Sleep ---

    def start_idle(self, now: Millis | None = None) -> IdleSession:
        if self._idle_session is not None and self._idle_session.is_active:
            return self._idle_session
        self._idle_session = self._idle.start(self._now(now), self._state)
        self._idle_totals = {}
        return self._idle_session

    def resume_idle(self, now: Millis | None = None) -> IdleProgress | None:
        if self._idle_session is None or not self._idle_session.is_active:
            return None
        progress = self._idle.resume(self._idle_session, self._now(now), self._state)
        self._idle_totals = dict(progress.accumulated)
        return progress

    def tick_idle(self, now: Millis | None = None) -> dict[str, float]:
        if self._idle_session is None:
            return {}
        self._idle_totals = self._idle.tick(
            self._idle_session, self._now(now), self._state, self._idle_totals
        )
        return dict(self._idle_totals)

    def end_idle(self, now: Millis | None = None) -> GameState:
        """Wake up: commit the totals as of *now* and clear the session."""
        if self._idle_session is None:
            return self._state
        at = self._now(now)
        totals = self.tick_idle(at)
        self._idle.settle(self._idle_session, totals, self._state, at, self._log)
        self._idle_session = None
        self._idle_totals = {}
        return self._state

    # --- Lifecycle ---

    def restart(self) -> None:
        """Start over: fresh state, no cooldowns, no sleep, empty log."""
        self._state = GameState()
        self._cooldowns.clear()
        self._log.clear()
        self._idle_session = None
        self._idle_totals = {}
        logger.info("game restarted")

    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible save. Combat sessions are never included."""
        return {
            "version": _SNAPSHOT_VERSION,
            "state": self._state.to_dict(),
            "cooldowns": self._cooldowns.snapshot(),
            "idle": self._idle_session.to_dict() if self._idle_session is not None else None,
            "log": self._log.snapshot(),
            "seed": self._seed,
            "rng_state": _serialize_rng_state(self._rng.getstate()),
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Load a ``snapshot`` dict. Raises SnapshotError if it cannot be read."""
        if not isinstance(data, dict):
            raise SnapshotError(f"Malformed snapshot: expected a mapping, got {type(data).__name__}")
        version = data.get("version")
        if version != _SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
            )
        try:
            state = GameState.from_dict(data["state"])
            cooldowns = CooldownTracker()
            cooldowns.restore(data.get("cooldowns") or {})
            log = NarrativeLog(self._config.log_capacity)
            log.restore(data.get("log") or [])
            idle = data.get("idle")
            idle_session = IdleSession.from_dict(idle) if idle else None
            rng_state = _deserialize_rng_state(data["rng_state"])
            random.Random().setstate(rng_state)
            seed = int(data["seed"])
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed snapshot: {exc}") from exc

        self._state = state
        self._cooldowns.restore(cooldowns.snapshot())
        self._log = log
        self._seed = seed
        self._rng.setstate(rng_state)
        self._idle_session = idle_session
        self._idle_totals = {}
        if idle_session is not None and idle_session.is_active:
            # Derived fields and totals are rebuilt from start_time.
            self.resume_idle()
        logger.debug("restored snapshot (idle=%s)", idle_session is not None)


def _serialize_rng_state(state: tuple[int, tuple[int, ...], float | None]) -> list[Any]:
    """Convert Random.getstate() tuple to JSON-compatible list."""
    version, internalstate, gauss_next = state
    return [version, list(internalstate), gauss_next]


def _deserialize_rng_state(data: list[Any]) -> tuple[int, tuple[int, ...], float | None]:
    version, internalstate, gauss_next = data
    return (version, tuple(internalstate), gauss_next)
