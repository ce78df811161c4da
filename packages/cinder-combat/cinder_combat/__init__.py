"""Turn-based combat against a single enemy, driven by the bastion."""
from cinder_combat.bastion import (
    calculate_bastion_stats,
    crit_chance,
    item_damage_bonus,
    luck_crit_chance,
)
from cinder_combat.catalog import DEFAULT_ITEMS, DEFAULT_SKILLS
from cinder_combat.resolver import CombatResolver
from cinder_combat.types import (
    DEFEAT,
    IN_PROGRESS,
    NOT_STARTED,
    VICTORY,
    BastionStats,
    CombatItemDef,
    CombatSession,
    Enemy,
    RoundReport,
    SkillDef,
    SkillEffect,
)

__all__ = [
    "BastionStats",
    "CombatItemDef",
    "CombatResolver",
    "CombatSession",
    "DEFAULT_ITEMS",
    "DEFAULT_SKILLS",
    "DEFEAT",
    "Enemy",
    "IN_PROGRESS",
    "NOT_STARTED",
    "RoundReport",
    "SkillDef",
    "SkillEffect",
    "VICTORY",
    "calculate_bastion_stats",
    "crit_chance",
    "item_damage_bonus",
    "luck_crit_chance",
]
