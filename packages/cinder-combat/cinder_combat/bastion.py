"""Bastion stats and critical chance derived from the state model."""
from __future__ import annotations

from typing import TYPE_CHECKING

from cinder import get_value

from cinder_combat.types import BastionStats

if TYPE_CHECKING:
    from cinder import GameState

BASTION_BONUS = (10, 5, 15)  # (defense, attack, integrity)

# Per-level bonuses, cumulative: level n grants the first n rows.
WATCHTOWER_LEVELS = (
    (5, 3, 5),
    (8, 5, 7),
    (12, 8, 10),
    (15, 15, 12),
)
PALISADES_LEVELS = (
    (8, 0, 6),
    (12, 0, 10),
    (20, 0, 18),
    (30, 0, 25),
)

STRENGTH_PER_ATTACK = 5

# (minimum luck, crit chance percent), highest threshold first.
LUCK_CRIT_STEPS = ((50, 25), (40, 20), (30, 15), (20, 10), (10, 5))
CRIT_ITEM_BONUSES = {
    "weapons.frostglass_sword": 5,
    "clothing.ravens_feather_cloak": 5,
}


def calculate_bastion_stats(state: GameState) -> BastionStats:
    defense = attack = integrity = 0
    rows: list[tuple[int, int, int]] = []
    if state.buildings.bastion > 0:
        rows.append(BASTION_BONUS)
    rows.extend(WATCHTOWER_LEVELS[: state.buildings.watchtower])
    rows.extend(PALISADES_LEVELS[: state.buildings.palisades])
    for d, a, i in rows:
        defense += d
        attack += a
        integrity += i
    attack += state.stats.strength // STRENGTH_PER_ATTACK
    return BastionStats(attack=attack, defense=defense, integrity=integrity)


def luck_crit_chance(luck: int) -> int:
    for threshold, chance in LUCK_CRIT_STEPS:
        if luck >= threshold:
            return chance
    return 0


def crit_chance(state: GameState) -> float:
    """Critical strike chance in percent: luck step plus owned item bonuses."""
    chance = luck_crit_chance(state.stats.luck)
    for path, bonus in CRIT_ITEM_BONUSES.items():
        if get_value(state, path):
            chance += bonus
    return float(chance)


def item_damage_bonus(state: GameState) -> int:
    """Flat damage added to every combat item: one point per 5 knowledge."""
    return state.stats.knowledge // 5
