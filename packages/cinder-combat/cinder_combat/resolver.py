"""CombatResolver — round-based fight resolution over a CombatSession."""
from __future__ import annotations

import logging
import random as _random_mod
from typing import TYPE_CHECKING, Callable, Mapping

from cinder import InvariantPolicy, get_value
from cinder_action import apply_cost, is_satisfied

from cinder_combat.bastion import calculate_bastion_stats, crit_chance, item_damage_bonus
from cinder_combat.catalog import DEFAULT_ITEMS, DEFAULT_SKILLS
from cinder_combat.types import (
    DEFEAT,
    IN_PROGRESS,
    TRANSITIONS,
    VICTORY,
    BastionStats,
    CombatItemDef,
    CombatSession,
    Enemy,
    RoundReport,
    SkillDef,
)

if TYPE_CHECKING:
    from cinder import GameState

logger = logging.getLogger(__name__)

Callback = Callable[[CombatSession], None]


class CombatResolver:
    """Drives combat sessions through ``in_progress`` to victory or defeat.

    Calls on a terminal session are rejected as no-ops. A fight round that
    is already being resolved rejects reentrant calls as an invariant
    violation.
    """

    def __init__(
        self,
        items: Mapping[str, CombatItemDef] | None = None,
        skills: Mapping[str, SkillDef] | None = None,
        rng: _random_mod.Random | None = None,
        policy: InvariantPolicy | None = None,
        critical_multiplier: float = 1.5,
    ) -> None:
        self._items = dict(items) if items is not None else dict(DEFAULT_ITEMS)
        self._skills = dict(skills) if skills is not None else dict(DEFAULT_SKILLS)
        self._rng = rng if rng is not None else _random_mod.Random()
        self._policy = policy if policy is not None else InvariantPolicy()
        self._critical_multiplier = critical_multiplier

    @property
    def items(self) -> dict[str, CombatItemDef]:
        return dict(self._items)

    @property
    def skills(self) -> dict[str, SkillDef]:
        return dict(self._skills)

    # --- Lifecycle ---

    def start(
        self,
        enemy: Enemy,
        state: GameState,
        on_victory: Callback | None = None,
        on_defeat: Callback | None = None,
        bastion: BastionStats | None = None,
    ) -> CombatSession:
        """Open a session against *enemy*. Bastion stats default to those derived from *state*."""
        stats = bastion if bastion is not None else calculate_bastion_stats(state)
        session = CombatSession(
            enemy=enemy,
            bastion=stats,
            enemy_health=enemy.health,
            integrity=stats.integrity,
            max_integrity=stats.integrity,
            crit_chance=crit_chance(state),
            item_bonus=item_damage_bonus(state),
            on_victory=on_victory,
            on_defeat=on_defeat,
        )
        self._transition(session, IN_PROGRESS)
        session.log.append(f"Round {session.round} begins!")
        logger.debug("combat started against %s (integrity %d)", enemy.name, stats.integrity)
        self._check_terminal(session)
        return session

    def end(self, session: CombatSession) -> bool:
        """Fire the victory/defeat callback. Only once, and only for a terminal session."""
        if not session.is_terminal or session.ended:
            return False
        session.ended = True
        callback = session.on_victory if session.phase == VICTORY else session.on_defeat
        logger.info("combat against %s ended: %s", session.enemy.name, session.phase)
        if callback is not None:
            callback(session)
        return True

    def abandon(self, session: CombatSession) -> bool:
        """Discard a session that has not resolved. No callbacks fire."""
        if session.is_terminal or session.ended:
            return False
        session.ended = True
        session.log.append("You withdraw from the fight.")
        logger.debug("combat against %s abandoned", session.enemy.name)
        return True

    # --- Player actions ---

    def can_use_item(self, session: CombatSession, item_id: str, state: GameState) -> bool:
        item = self._items.get(item_id)
        if item is None or not self._accepting(session):
            return False
        if item_id in session.items_this_round:
            return False
        if session.item_uses.get(item_id, 0) >= item.max_per_combat:
            return False
        if item.delayed and session.poison_damage > 0:
            return False
        return get_value(state, item.stock_path) >= 1

    def use_item(self, session: CombatSession, item_id: str, state: GameState) -> bool:
        """Consume one unit of *item_id* and apply it. Returns False if rejected."""
        if self._latched(session):
            return False
        if not self.can_use_item(session, item_id, state):
            logger.debug("item %s rejected", item_id)
            return False
        item = self._items[item_id]
        if not apply_cost(state, {item.stock_path: 1}):
            return False
        session.items_this_round.add(item_id)
        session.item_uses[item_id] = session.item_uses.get(item_id, 0) + 1
        damage = item.damage + session.item_bonus
        if item.delayed:
            session.poison_damage = damage
            session.log.append(f"{item.name} armed: {damage} damage every round.")
        else:
            session.enemy_health = max(0, session.enemy_health - damage)
            session.log.append(f"Used {item.name} for {damage} damage!")
        self._check_terminal(session)
        return True

    def can_use_skill(self, session: CombatSession, skill_id: str, state: GameState) -> bool:
        skill = self._skills.get(skill_id)
        if skill is None or not self._accepting(session):
            return False
        if skill_id in session.skills_used:
            return False
        if not is_satisfied(skill.requires, state):
            return False
        effect = skill.at(int(get_value(state, skill.level_path)))
        if effect.health_cost and session.integrity <= effect.health_cost:
            return False
        return True

    def use_skill(self, session: CombatSession, skill_id: str, state: GameState) -> bool:
        """Apply *skill_id* once for this combat. Returns False if rejected."""
        if self._latched(session):
            return False
        if not self.can_use_skill(session, skill_id, state):
            logger.debug("skill %s rejected", skill_id)
            return False
        skill = self._skills[skill_id]
        effect = skill.at(int(get_value(state, skill.level_path)))
        session.skills_used.add(skill_id)
        session.integrity = max(0, session.integrity - effect.health_cost)
        session.enemy_health = max(0, session.enemy_health - effect.damage)
        if effect.stun_rounds:
            session.stun_rounds = max(session.stun_rounds, effect.stun_rounds)
        if effect.burn_rounds:
            session.burn_rounds = effect.burn_rounds
            session.burn_damage = effect.burn_damage
        session.log.append(f"{skill.name} deals {effect.damage} damage!")
        self._check_terminal(session)
        return True

    def fight(self, session: CombatSession) -> RoundReport | None:
        """Resolve one round. Returns None if the session is not accepting actions."""
        if self._latched(session):
            return None
        if not self._accepting(session):
            return None
        session.processing = True
        try:
            return self._resolve_round(session)
        finally:
            session.processing = False

    # --- Internals ---

    def _resolve_round(self, session: CombatSession) -> RoundReport:
        number = session.round
        critical = self._rng.random() < session.crit_chance / 100.0
        multiplier = self._critical_multiplier if critical else 1.0

        poison = session.poison_damage
        burn = 0
        if session.burn_rounds > 0:
            burn = session.burn_damage
            session.burn_rounds -= 1
            if session.burn_rounds == 0:
                session.burn_damage = 0

        # Enemy strikes first.
        stunned = session.stun_rounds > 0
        lost = 0
        if stunned:
            session.stun_rounds -= 1
            session.log.append(f"{session.enemy.name} is stunned and cannot attack!")
        elif session.enemy.attack > session.bastion.defense:
            lost = min(session.integrity, session.enemy.attack - session.bastion.defense)
            session.integrity -= lost
            session.log.append(
                f"{session.enemy.name} deals {lost} damage! "
                f"(Attack {session.enemy.attack} vs Defense {session.bastion.defense})"
            )
        else:
            session.log.append(
                f"Your defenses hold! (Defense {session.bastion.defense} vs Attack {session.enemy.attack})"
            )
        if session.integrity == 0:
            self._transition(session, DEFEAT)
            session.log.append("The bastion falls.")
            return RoundReport(number, critical, stunned, lost, 0, session.phase)

        dealt = int(session.bastion.attack * multiplier) + poison + burn
        session.enemy_health = max(0, session.enemy_health - dealt)
        session.log.append(f"You deal {dealt} damage!" + (" Critical strike!" if critical else ""))
        if session.enemy_health == 0:
            self._transition(session, VICTORY)
            session.log.append(f"{session.enemy.name} is defeated!")
        else:
            session.round += 1
            session.items_this_round.clear()
            session.log.append(f"Round {session.round} begins!")
        return RoundReport(number, critical, stunned, lost, dealt, session.phase)

    def _latched(self, session: CombatSession) -> bool:
        if session.processing:
            self._policy.violation("combat", "reentrant call while a round is in flight")
            return True
        return False

    def _accepting(self, session: CombatSession) -> bool:
        return session.phase == IN_PROGRESS and not session.ended

    def _check_terminal(self, session: CombatSession) -> None:
        if session.phase != IN_PROGRESS:
            return
        if session.integrity == 0:
            self._transition(session, DEFEAT)
        elif session.enemy_health == 0:
            self._transition(session, VICTORY)
            session.log.append(f"{session.enemy.name} is defeated!")

    def _transition(self, session: CombatSession, target: str) -> None:
        if target not in TRANSITIONS[session.phase]:
            self._policy.violation("combat", f"illegal transition {session.phase} -> {target}")
            return
        logger.debug("combat %s: %s -> %s", session.enemy.name, session.phase, target)
        session.phase = target
