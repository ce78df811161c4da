"""Formulas registry for state-derived values referenced by name."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from cinder_action.types import Computed

if TYPE_CHECKING:
    from cinder import GameState


class Formulas:
    """Maps formula name strings to pure functions of state."""

    def __init__(self) -> None:
        self._formulas: dict[str, Callable[[GameState], Any]] = {}

    def register(self, name: str, fn: Callable[[GameState], Any]) -> None:
        """Register a named formula. Overwrites if already registered."""
        self._formulas[name] = fn

    def evaluate(self, name: str, state: GameState) -> Any:
        """Evaluate a formula. Raises KeyError if not registered."""
        return self._formulas[name](state)

    def resolve(self, value: Any, state: GameState) -> Any:
        """Return *value*, evaluating it first if it is ``Computed``."""
        if isinstance(value, Computed):
            return self.evaluate(value.formula, state)
        return value

    def has(self, name: str) -> bool:
        """Check if formula name is registered."""
        return name in self._formulas

    def names(self) -> list[str]:
        """List all registered formula names."""
        return list(self._formulas)
