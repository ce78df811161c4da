"""ActionExecutor — visibility, affordability and cooldown gating for actions."""
from __future__ import annotations

import logging
import random as _random_mod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cinder import InvariantPolicy, LogEntry, Millis, get_value, make_entry

from cinder_action.conditions import is_satisfied, unmet
from cinder_action.cooldown import CooldownRecord, CooldownTracker
from cinder_action.resolver import Resolver, can_afford, commit, stage

if TYPE_CHECKING:
    from cinder import GameState

    from cinder_action.registry import ActionRegistry

logger = logging.getLogger(__name__)

REASON_UNKNOWN = "unknown"
REASON_MAXED = "maxed"
REASON_HIDDEN = "hidden"
REASON_UNAFFORDABLE = "unaffordable"
REASON_COOLDOWN = "cooldown"


@dataclass
class ExecutionResult:
    """Outcome of one ``execute`` call.

    A rejected call has ``executed=False``, the untouched state, no cooldown
    record and a ``reason``.
    """

    action_id: str
    executed: bool
    state: GameState
    cooldown: CooldownRecord | None = None
    log_entries: list[LogEntry] = field(default_factory=list)
    reason: str | None = None


class ActionExecutor:
    """Decides whether an action may fire and applies it when it can."""

    def __init__(
        self,
        registry: ActionRegistry,
        cooldowns: CooldownTracker | None = None,
        policy: InvariantPolicy | None = None,
        rng: _random_mod.Random | None = None,
    ) -> None:
        self._registry = registry
        self._cooldowns = cooldowns if cooldowns is not None else CooldownTracker()
        self._policy = policy if policy is not None else InvariantPolicy()
        self._rng = rng if rng is not None else _random_mod.Random()
        self._resolver = Resolver(registry, self._policy)

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def cooldowns(self) -> CooldownTracker:
        return self._cooldowns

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    # --- Queries ---

    def level_for(self, action_id: str, state: GameState) -> int:
        """Next level for building actions, 1 for everything else."""
        defn = self._registry.get(action_id)
        if defn.building is None:
            return 1
        return int(get_value(state, f"buildings.{defn.building}")) + 1

    def is_visible(self, action_id: str, state: GameState) -> bool:
        if action_id not in self._registry:
            return False
        defn = self._registry.get(action_id)
        level = self.level_for(action_id, state)
        if not defn.has_level(level):
            return False
        return is_satisfied(defn.show_when.get(level, {}), state, self._registry.formulas)

    def check(self, action_id: str, state: GameState, now: Millis) -> str | None:
        """Return why the action cannot run now, or None if it can."""
        if action_id not in self._registry:
            return REASON_UNKNOWN
        defn = self._registry.get(action_id)
        level = self.level_for(action_id, state)
        if not defn.has_level(level):
            return REASON_MAXED
        conditions = defn.show_when.get(level, {})
        if not is_satisfied(conditions, state, self._registry.formulas):
            if logger.isEnabledFor(logging.DEBUG):
                failed = unmet(conditions, state, self._registry.formulas)
                logger.debug("%s hidden, unmet: %s", action_id, [str(p) for p in failed])
            return REASON_HIDDEN
        cost = self._resolver.resolve_cost(action_id, level, state)
        if not can_afford(state, cost):
            return REASON_UNAFFORDABLE
        if not self._cooldowns.is_ready(action_id, now):
            return REASON_COOLDOWN
        return None

    def can_execute(self, action_id: str, state: GameState, now: Millis) -> bool:
        return self.check(action_id, state, now) is None

    def visible_actions(self, state: GameState) -> list[str]:
        return [a for a in self._registry.ids() if self.is_visible(a, state)]

    def label(self, action_id: str, state: GameState) -> str:
        defn = self._registry.get(action_id)
        label = self._registry.formulas.resolve(defn.label, state)
        return str(label) if label else action_id

    def cost_display(self, action_id: str, state: GameState) -> str:
        """Human-readable cost for the next level, e.g. ``"-10 Wood, -5 Stone"``."""
        defn = self._registry.get(action_id)
        level = self.level_for(action_id, state)
        if not defn.has_level(level):
            return ""
        cost = self._resolver.resolve_cost(action_id, level, state)
        parts = []
        for path, amount in cost.items():
            name = " ".join(word.capitalize() for word in path.key.split("_"))
            parts.append(f"-{amount} {name}")
        return ", ".join(parts)

    # --- Execution ---

    def execute(self, action_id: str, state: GameState, now: Millis) -> ExecutionResult:
        """Deduct cost, apply effects and start the cooldown, all or nothing.

        A call that fails ``check`` is a no-op: state and cooldowns are
        left exactly as they were.
        """
        reason = self.check(action_id, state, now)
        if reason is not None:
            logger.debug("rejected %s: %s", action_id, reason)
            return ExecutionResult(action_id=action_id, executed=False, state=state, reason=reason)

        defn = self._registry.get(action_id)
        level = self.level_for(action_id, state)
        cost = self._resolver.resolve_cost(action_id, level, state)
        effects = self._resolver.resolve_effects(action_id, level)
        resolution = stage(
            state, cost, effects, self._registry.formulas, self._rng, self._policy
        )

        entries: list[LogEntry] = []
        for note in defn.narrative:
            # The seen flag is committed with the effects so the message fires once.
            if get_value(state, note.path) or resolution.writes.get(note.path):
                continue
            resolution.writes[note.path] = True
            entries.append(make_entry(f"{action_id}-{note.seen_key}", note.message, now, "action"))
        for i, message in enumerate(resolution.messages):
            entries.append(make_entry(f"{action_id}-event{i}", message, now, "event"))

        commit(state, resolution.writes)
        record = self._cooldowns.mark_used(action_id, now, defn.cooldown)
        logger.debug("executed %s at level %d, ready at %.0f", action_id, level, record.ready_at)
        return ExecutionResult(
            action_id=action_id,
            executed=True,
            state=state,
            cooldown=record,
            log_entries=entries,
        )
