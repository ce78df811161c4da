"""Villager job assignment: move villagers between ``free`` and a working role."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cinder import ConfigurationError, get_value, set_value

from cinder_action.conditions import is_satisfied

if TYPE_CHECKING:
    from cinder import GameState

logger = logging.getLogger(__name__)

# role -> conditions under which the job is offered
ROLE_REQUIREMENTS: dict[str, dict[str, Any]] = {
    "gatherer": {"flags.village_unlocked": True},
    "hunter": {"flags.forest_unlocked": True},
    "tanner": {"buildings.tannery": 1},
    "iron_miner": {"tools.stone_pickaxe": True},
    "coal_miner": {"tools.stone_pickaxe": True},
    "sulfur_miner": {"buildings.foundry": 1},
    "steel_forger": {"buildings.foundry": 1},
}


def _check_role(role: str) -> None:
    if role not in ROLE_REQUIREMENTS:
        raise ConfigurationError(f"Unknown villager role {role!r}")


def role_available(state: GameState, role: str) -> bool:
    _check_role(role)
    return is_satisfied(ROLE_REQUIREMENTS[role], state)


def available_roles(state: GameState) -> list[str]:
    return [role for role in ROLE_REQUIREMENTS if role_available(state, role)]


def can_assign(state: GameState, role: str) -> bool:
    return role_available(state, role) and state.villagers.free > 0


def assign_villager(state: GameState, role: str) -> bool:
    """Move one free villager into *role*. Returns False if none is free or the job is locked.

    The first villager ever given a job marks ``story.seen.has_<role>``.
    """
    if not can_assign(state, role):
        return False
    path = f"villagers.{role}"
    state.villagers.free -= 1
    set_value(state, path, get_value(state, path) + 1)
    set_value(state, f"story.seen.has_{role}", True)
    logger.debug("assigned villager to %s (%d free)", role, state.villagers.free)
    return True


def unassign_villager(state: GameState, role: str) -> bool:
    """Return one villager from *role* to the free pool. Returns False if the role is empty."""
    _check_role(role)
    path = f"villagers.{role}"
    current = get_value(state, path)
    if current <= 0:
        return False
    set_value(state, path, current - 1)
    state.villagers.free += 1
    logger.debug("unassigned villager from %s (%d free)", role, state.villagers.free)
    return True
