"""Cost/effect resolution and all-or-nothing application to state."""
from __future__ import annotations

import logging
import random as _random_mod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

from cinder import ConfigurationError, InvariantPolicy, Scalar, StatePath, get_value, set_value

from cinder_action.types import Chance, Computed, Effect, RandomRange, SetTo

if TYPE_CHECKING:
    from cinder import GameState

    from cinder_action.formulas import Formulas
    from cinder_action.registry import ActionRegistry

logger = logging.getLogger(__name__)

# Ownership flags: once true, normal play never resets them.
MONOTONIC_NAMESPACES = frozenset({"tools", "weapons", "clothing", "story.seen"})


@dataclass
class Resolution:
    """Staged writes for one invocation. Nothing touches state until ``commit``."""

    writes: dict[StatePath, Scalar] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)


class Resolver:
    """Produces cost and effect maps for an action at a given level."""

    def __init__(self, registry: ActionRegistry, policy: InvariantPolicy | None = None) -> None:
        self._registry = registry
        self._policy = policy if policy is not None else InvariantPolicy()

    def resolve_cost(self, action_id: str, level: int, state: GameState) -> dict[StatePath, int]:
        """Non-negative amounts to subtract. Raises ConfigurationError for an undefined level."""
        defn = self._registry.get(action_id)
        if not defn.cost:
            return {}
        row = defn.cost.get(level)
        if row is None:
            raise ConfigurationError(f"{action_id}: no cost defined for level {level}")
        formulas = self._registry.formulas
        resolved: dict[StatePath, int] = {}
        for path, amount in row.items():
            value = int(formulas.resolve(amount, state))
            resolved[path] = self._policy.non_negative(f"{action_id} cost {path}", value)
        return resolved

    def resolve_effects(self, action_id: str, level: int) -> dict[StatePath, Effect]:
        """Effect variants for *level*. Raises ConfigurationError for an undefined level."""
        defn = self._registry.get(action_id)
        if not defn.effects:
            return {}
        row = defn.effects.get(level)
        if row is None:
            raise ConfigurationError(f"{action_id}: no effects defined for level {level}")
        return dict(row)


def can_afford(state: GameState, cost: Mapping[StatePath, int]) -> bool:
    """Check every cost path holds at least its amount."""
    for path, amount in cost.items():
        if get_value(state, path) < amount:
            return False
    return True


def stage(
    state: GameState,
    cost: Mapping[StatePath, int],
    effects: Mapping[StatePath, Effect],
    formulas: Formulas,
    rng: _random_mod.Random,
    policy: InvariantPolicy,
) -> Resolution:
    """Compute the writes for deducting *cost* then applying *effects*.

    Numeric deltas add, literals overwrite. Negative numeric results and
    ownership flags flipping back to False are reported to *policy*
    before anything is written.
    """
    resolution = Resolution()
    pending = resolution.writes

    def current(path: StatePath) -> Any:
        return pending[path] if path in pending else get_value(state, path)

    def apply(path: StatePath, value: Any) -> None:
        if isinstance(value, RandomRange):
            pending[path] = current(path) + rng.randint(value.low, value.high)
        elif isinstance(value, SetTo):
            pending[path] = value.value
        elif isinstance(value, bool) or path.kind is bool:
            pending[path] = bool(value)
        else:
            pending[path] = current(path) + int(value)

    for path, amount in cost.items():
        pending[path] = current(path) - amount

    for path, effect in effects.items():
        if isinstance(effect, Computed):
            effect = formulas.evaluate(effect.formula, state)
        if isinstance(effect, Chance):
            luck = state.stats.luck
            probability = min(effect.probability * (1 + luck / 100), 1.0)
            if rng.random() < probability:
                apply(path, effect.value)
                if effect.log_message:
                    resolution.messages.append(effect.log_message)
            continue
        apply(path, effect)

    for path, value in pending.items():
        if path.is_numeric:
            pending[path] = policy.non_negative(str(path), value)
        elif path.namespace in MONOTONIC_NAMESPACES and value is False and get_value(state, path):
            policy.violation(str(path), f"ownership flag {path} would be reset")
            pending[path] = True
    return resolution


def commit(state: GameState, writes: Mapping[StatePath, Scalar]) -> None:
    for path, value in writes.items():
        set_value(state, path, value)


def apply_cost(state: GameState, cost: Mapping[StatePath, int]) -> bool:
    """Deduct *cost* atomically. Returns False, leaving state untouched, if unaffordable."""
    if not can_afford(state, cost):
        return False
    for path, amount in cost.items():
        set_value(state, path, get_value(state, path) - amount)
    return True
