"""Built-in combat items and skills."""
from __future__ import annotations

from cinder_combat.types import CombatItemDef, SkillDef

EMBER_BOMB = CombatItemDef(id="ember_bomb", name="Ember Bomb", damage=10, max_per_combat=3)
ASHFIRE_BOMB = CombatItemDef(id="ashfire_bomb", name="Ashfire Bomb", damage=25, max_per_combat=2)
VOID_BOMB = CombatItemDef(id="void_bomb", name="Void Bomb", damage=40, max_per_combat=1)
POISON_ARROWS = CombatItemDef(
    id="poison_arrows", name="Poison Arrows", damage=15, max_per_combat=1, delayed=True
)

DEFAULT_ITEMS: dict[str, CombatItemDef] = {
    item.id: item for item in (EMBER_BOMB, ASHFIRE_BOMB, VOID_BOMB, POISON_ARROWS)
}

CRUSHING_STRIKE = SkillDef(
    id="crushing_strike",
    name="Crushing Strike",
    level_path="combat_skills.crushing_strike_level",
    requires={"flags.knight_recruited": True},
    damage=(10, 20, 30, 40, 50, 60),
    stun_rounds=(1, 1, 1, 2, 2, 3),
)

BLOODFLAME_SPHERE = SkillDef(
    id="bloodflame_sphere",
    name="Bloodflame Sphere",
    level_path="combat_skills.bloodflame_sphere_level",
    requires={"flags.wizard_recruited": True},
    damage=(10, 15, 20, 25, 30, 35),
    burn_damage=(10, 15, 20, 25, 30, 35),
    burn_rounds=(1, 1, 1, 2, 2, 3),
    health_cost=(10, 10, 10, 20, 20, 20),
)

DEFAULT_SKILLS: dict[str, SkillDef] = {
    skill.id: skill for skill in (CRUSHING_STRIKE, BLOODFLAME_SPHERE)
}
