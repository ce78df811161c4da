"""Declarative actions: definitions, conditions, costs, effects and cooldowns."""
from cinder_action.catalog import DEFAULT_ACTIONS, default_formulas, default_registry
from cinder_action.conditions import is_satisfied, requirement_met, unmet
from cinder_action.cooldown import CooldownRecord, CooldownTracker
from cinder_action.executor import ActionExecutor, ExecutionResult
from cinder_action.formulas import Formulas
from cinder_action.registry import ActionRegistry
from cinder_action.resolver import Resolution, Resolver, apply_cost, can_afford, commit, stage
from cinder_action.types import ActionDef, Chance, Computed, Narrative, RandomRange, SetTo
from cinder_action.villagers import (
    ROLE_REQUIREMENTS,
    assign_villager,
    available_roles,
    can_assign,
    unassign_villager,
)

__all__ = [
    "ActionDef",
    "ActionExecutor",
    "ActionRegistry",
    "Chance",
    "Computed",
    "CooldownRecord",
    "CooldownTracker",
    "DEFAULT_ACTIONS",
    "ExecutionResult",
    "Formulas",
    "Narrative",
    "RandomRange",
    "ROLE_REQUIREMENTS",
    "Resolution",
    "Resolver",
    "SetTo",
    "apply_cost",
    "assign_villager",
    "available_roles",
    "can_assign",
    "can_afford",
    "commit",
    "default_formulas",
    "default_registry",
    "is_satisfied",
    "requirement_met",
    "stage",
    "unassign_villager",
    "unmet",
]
