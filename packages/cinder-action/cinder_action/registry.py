"""ActionRegistry class."""
from __future__ import annotations

import logging
from typing import Iterable

from cinder import ConfigurationError

from cinder_action.formulas import Formulas
from cinder_action.types import ActionDef

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Stores action definitions and the formulas they reference.

    Definitions are read-only once loaded. ``validate`` checks the
    cross-references a single definition cannot check on its own.
    """

    def __init__(self, formulas: Formulas | None = None) -> None:
        self._definitions: dict[str, ActionDef] = {}
        self._formulas = formulas if formulas is not None else Formulas()

    @classmethod
    def load(
        cls, definitions: Iterable[ActionDef], formulas: Formulas | None = None
    ) -> ActionRegistry:
        """Define every action and validate the result. Raises ConfigurationError."""
        registry = cls(formulas)
        for defn in definitions:
            registry.define(defn)
        registry.validate()
        return registry

    @property
    def formulas(self) -> Formulas:
        return self._formulas

    def define(self, action: ActionDef) -> None:
        """Register an action. Raises ConfigurationError on duplicate ids."""
        if action.id in self._definitions:
            raise ConfigurationError(f"Duplicate action id {action.id!r}")
        self._definitions[action.id] = action

    def get(self, action_id: str) -> ActionDef:
        """Look up definition. Raises KeyError if not defined."""
        if action_id not in self._definitions:
            raise KeyError(action_id)
        return self._definitions[action_id]

    def has(self, action_id: str) -> bool:
        """Check if action id is defined."""
        return action_id in self._definitions

    def ids(self) -> list[str]:
        """Return all defined action ids in definition order."""
        return list(self._definitions.keys())

    def validate(self) -> None:
        """Check unlock targets and formula references across the registry."""
        errors: list[str] = []
        for action_id, defn in self._definitions.items():
            for target in defn.unlocks:
                if target not in self._definitions:
                    errors.append(f"{action_id}: unlocks unknown action {target!r}")
            for name in defn.computed_refs():
                if not self._formulas.has(name):
                    errors.append(f"{action_id}: references unknown formula {name!r}")
        if errors:
            raise ConfigurationError("; ".join(errors))
        logger.debug("validated %d action definitions", len(self._definitions))

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._definitions
