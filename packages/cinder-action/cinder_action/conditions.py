"""Condition evaluation for ``show_when`` maps and other requirement sets."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from cinder import StatePath, as_path, get_value

if TYPE_CHECKING:
    from cinder import GameState

    from cinder_action.formulas import Formulas


def requirement_met(current: Any, required: Any) -> bool:
    """Booleans require equality; numbers require ``current >= required``."""
    if isinstance(required, bool):
        return bool(current) is required
    return (current or 0) >= required


def is_satisfied(
    conditions: Mapping[StatePath | str, Any],
    state: GameState,
    formulas: Formulas | None = None,
) -> bool:
    """True when every path in *conditions* meets its requirement.

    An empty map is vacuously satisfied. ``Computed`` requirements are
    resolved through *formulas* before comparison.
    """
    for key, required in conditions.items():
        if formulas is not None:
            required = formulas.resolve(required, state)
        if not requirement_met(get_value(state, as_path(key)), required):
            return False
    return True


def unmet(
    conditions: Mapping[StatePath | str, Any],
    state: GameState,
    formulas: Formulas | None = None,
) -> list[StatePath]:
    """Paths whose requirement is not met, in definition order."""
    failed: list[StatePath] = []
    for key, required in conditions.items():
        if formulas is not None:
            required = formulas.resolve(required, state)
        path = as_path(key)
        if not requirement_met(get_value(state, path), required):
            failed.append(path)
    return failed
