"""Tests for cinder_combat.resolver — CombatResolver."""
from __future__ import annotations

from random import Random

import pytest

from cinder import GameState, InvariantPolicy, InvariantViolation

from cinder_combat.resolver import CombatResolver
from cinder_combat.types import (
    DEFEAT,
    IN_PROGRESS,
    VICTORY,
    BastionStats,
    CombatSession,
    Enemy,
    SkillDef,
)


class _FixedRandom(Random):
    """Random whose ``random()`` always returns one value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


NO_CRIT = 0.999
WOLF = Enemy(name="Wolf", health=100, max_health=100, attack=20)
WALLS = BastionStats(attack=15, defense=10, integrity=50)


def _resolver(rng: Random | None = None, strict: bool = True) -> CombatResolver:
    return CombatResolver(rng=rng or _FixedRandom(NO_CRIT), policy=InvariantPolicy(strict=strict))


class TestStart:
    def test_initial_session(self) -> None:
        session = _resolver().start(WOLF, GameState(), bastion=WALLS)
        assert session.phase == IN_PROGRESS
        assert session.round == 1
        assert session.enemy_health == 100
        assert session.integrity == 50
        assert session.max_integrity == 50
        assert session.result is None
        assert session.log == ["Round 1 begins!"]

    def test_bastion_derived_from_state(self) -> None:
        state = GameState()
        state.buildings.bastion = 1
        session = _resolver().start(WOLF, state)
        assert session.bastion == BastionStats(attack=5, defense=10, integrity=15)
        assert session.integrity == 15

    def test_no_integrity_is_immediate_defeat(self) -> None:
        session = _resolver().start(WOLF, GameState())
        assert session.phase == DEFEAT
        assert session.is_terminal

    def test_enemy_validation(self) -> None:
        with pytest.raises(ValueError):
            Enemy(name="x", health=5, max_health=0, attack=1)
        with pytest.raises(ValueError):
            Enemy(name="x", health=11, max_health=10, attack=1)


class TestFight:
    def test_one_round(self) -> None:
        resolver = _resolver()
        session = resolver.start(WOLF, GameState(), bastion=WALLS)

        report = resolver.fight(session)
        assert report is not None
        assert not report.critical
        assert report.integrity_lost == 10
        assert report.damage_dealt == 15
        assert session.integrity == 40
        assert session.enemy_health == 85
        assert session.round == 2

    def test_defense_holds(self) -> None:
        resolver = _resolver()
        weak = Enemy(name="Rat", health=30, max_health=30, attack=5)
        session = resolver.start(weak, GameState(), bastion=WALLS)
        report = resolver.fight(session)
        assert report is not None
        assert report.integrity_lost == 0
        assert session.integrity == 50

    def test_critical_strike(self) -> None:
        state = GameState()
        state.stats.luck = 50
        resolver = _resolver(_FixedRandom(0.0))
        session = resolver.start(WOLF, state, bastion=WALLS)
        assert session.crit_chance == 25.0

        report = resolver.fight(session)
        assert report is not None
        assert report.critical
        assert report.damage_dealt == 22
        assert session.enemy_health == 78

    def test_no_crit_without_chance(self) -> None:
        resolver = _resolver(_FixedRandom(0.0))
        session = resolver.start(WOLF, GameState(), bastion=WALLS)
        report = resolver.fight(session)
        assert report is not None
        assert not report.critical

    def test_victory(self) -> None:
        resolver = _resolver()
        weak = Enemy(name="Rat", health=10, max_health=10, attack=0)
        session = resolver.start(weak, GameState(), bastion=WALLS)
        report = resolver.fight(session)
        assert report is not None
        assert report.phase == VICTORY
        assert session.enemy_health == 0
        assert session.round == 1

    def test_defeat_skips_player_attack(self) -> None:
        resolver = _resolver()
        brute = Enemy(name="Troll", health=100, max_health=100, attack=100)
        session = resolver.start(brute, GameState(), bastion=WALLS)
        report = resolver.fight(session)
        assert report is not None
        assert report.phase == DEFEAT
        assert report.damage_dealt == 0
        assert session.integrity == 0
        assert session.enemy_health == 100

    def test_terminal_session_rejects_fight(self) -> None:
        resolver = _resolver()
        weak = Enemy(name="Rat", health=10, max_health=10, attack=0)
        session = resolver.start(weak, GameState(), bastion=WALLS)
        resolver.fight(session)
        log_length = len(session.log)
        assert resolver.fight(session) is None
        assert len(session.log) == log_length

    def test_items_reset_each_round(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.ember_bomb = 5
        session = resolver.start(WOLF, state, bastion=WALLS)

        assert resolver.use_item(session, "ember_bomb", state)
        assert session.items_this_round == {"ember_bomb"}
        resolver.fight(session)
        assert session.items_this_round == set()
        assert session.item_uses == {"ember_bomb": 1}


class TestItems:
    def test_bomb_deals_damage_and_consumes_stock(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.ember_bomb = 2
        session = resolver.start(WOLF, state, bastion=WALLS)

        assert resolver.use_item(session, "ember_bomb", state)
        assert session.enemy_health == 90
        assert state.resources.ember_bomb == 1

    def test_once_per_round(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.ember_bomb = 5
        session = resolver.start(WOLF, state, bastion=WALLS)

        assert resolver.use_item(session, "ember_bomb", state)
        assert not resolver.use_item(session, "ember_bomb", state)
        assert state.resources.ember_bomb == 4

    def test_per_combat_cap(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.void_bomb = 3
        big = Enemy(name="Golem", health=500, max_health=500, attack=0)
        session = resolver.start(big, state, bastion=WALLS)

        assert resolver.use_item(session, "void_bomb", state)
        resolver.fight(session)
        assert not resolver.can_use_item(session, "void_bomb", state)
        assert not resolver.use_item(session, "void_bomb", state)
        assert state.resources.void_bomb == 2

    def test_no_stock_rejected(self) -> None:
        resolver = _resolver()
        state = GameState()
        session = resolver.start(WOLF, state, bastion=WALLS)
        assert not resolver.use_item(session, "ember_bomb", state)
        assert session.enemy_health == 100

    def test_unknown_item_rejected(self) -> None:
        resolver = _resolver()
        session = resolver.start(WOLF, GameState(), bastion=WALLS)
        assert not resolver.use_item(session, "grenade", GameState())

    def test_knowledge_bonus(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.stats.knowledge = 10
        state.resources.ashfire_bomb = 1
        session = resolver.start(WOLF, state, bastion=WALLS)
        resolver.use_item(session, "ashfire_bomb", state)
        assert session.enemy_health == 100 - 27

    def test_item_kill_is_victory(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.void_bomb = 1
        weak = Enemy(name="Rat", health=30, max_health=30, attack=0)
        session = resolver.start(weak, state, bastion=WALLS)
        assert resolver.use_item(session, "void_bomb", state)
        assert session.phase == VICTORY
        assert session.enemy_health == 0

    def test_poison_applies_every_round(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.poison_arrows = 3
        session = resolver.start(WOLF, state, bastion=WALLS)

        assert resolver.use_item(session, "poison_arrows", state)
        assert session.enemy_health == 100
        assert session.poison_damage == 15

        resolver.fight(session)
        assert session.enemy_health == 100 - 30
        resolver.fight(session)
        assert session.enemy_health == 100 - 60

    def test_poison_is_counted_once(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.resources.poison_arrows = 3
        session = resolver.start(WOLF, state, bastion=WALLS)
        resolver.use_item(session, "poison_arrows", state)
        resolver.fight(session)
        assert not resolver.use_item(session, "poison_arrows", state)
        assert session.item_uses == {"poison_arrows": 1}
        assert state.resources.poison_arrows == 2


class TestSkills:
    def test_requires_recruit(self) -> None:
        resolver = _resolver()
        state = GameState()
        session = resolver.start(WOLF, state, bastion=WALLS)
        assert not resolver.use_skill(session, "crushing_strike", state)
        state.flags.knight_recruited = True
        assert resolver.use_skill(session, "crushing_strike", state)
        assert session.enemy_health == 90

    def test_once_per_combat(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.flags.knight_recruited = True
        session = resolver.start(WOLF, state, bastion=WALLS)
        assert resolver.use_skill(session, "crushing_strike", state)
        resolver.fight(session)
        assert not resolver.use_skill(session, "crushing_strike", state)

    def test_stunned_enemy_skips_attack(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.flags.knight_recruited = True
        state.combat_skills.crushing_strike_level = 3
        session = resolver.start(WOLF, state, bastion=WALLS)

        assert resolver.use_skill(session, "crushing_strike", state)
        assert session.enemy_health == 60
        assert session.stun_rounds == 2

        report = resolver.fight(session)
        assert report is not None
        assert report.stunned
        assert report.integrity_lost == 0
        assert session.stun_rounds == 1
        assert session.integrity == 50

        report = resolver.fight(session)
        assert report is not None
        assert report.stunned
        assert session.stun_rounds == 0

        report = resolver.fight(session)
        assert report is not None
        assert not report.stunned
        assert session.integrity == 40

    def test_bloodflame_burn_and_cost(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.flags.wizard_recruited = True
        state.combat_skills.bloodflame_sphere_level = 3
        big = Enemy(name="Golem", health=500, max_health=500, attack=0)
        session = resolver.start(big, state, bastion=WALLS)

        assert resolver.use_skill(session, "bloodflame_sphere", state)
        assert session.integrity == 30
        assert session.enemy_health == 475
        assert (session.burn_rounds, session.burn_damage) == (2, 25)

        resolver.fight(session)
        assert session.enemy_health == 475 - 15 - 25
        resolver.fight(session)
        assert session.enemy_health == 475 - 2 * (15 + 25)
        assert session.burn_rounds == 0
        resolver.fight(session)
        assert session.enemy_health == 475 - 2 * (15 + 25) - 15

    def test_health_cost_needs_more_integrity(self) -> None:
        resolver = _resolver()
        state = GameState()
        state.flags.wizard_recruited = True
        session = resolver.start(WOLF, state, bastion=BastionStats(attack=1, defense=0, integrity=10))
        assert not resolver.can_use_skill(session, "bloodflame_sphere", state)
        assert not resolver.use_skill(session, "bloodflame_sphere", state)
        assert session.integrity == 10

    def test_level_past_table_uses_last_entry(self) -> None:
        skill = SkillDef(
            id="jab", name="Jab", level_path="combat_skills.crushing_strike_level", damage=(1, 2)
        )
        assert skill.at(0).damage == 1
        assert skill.at(9).damage == 2
        assert skill.at(-3).damage == 1


class TestLifecycle:
    def test_end_fires_victory_once(self) -> None:
        calls: list[str] = []
        resolver = _resolver()
        weak = Enemy(name="Rat", health=10, max_health=10, attack=0)
        session = resolver.start(
            weak,
            GameState(),
            on_victory=lambda s: calls.append("victory"),
            on_defeat=lambda s: calls.append("defeat"),
            bastion=WALLS,
        )
        assert not resolver.end(session)
        resolver.fight(session)
        assert resolver.end(session)
        assert not resolver.end(session)
        assert calls == ["victory"]

    def test_end_fires_defeat(self) -> None:
        calls: list[str] = []
        resolver = _resolver()
        session = resolver.start(WOLF, GameState(), on_defeat=lambda s: calls.append(s.phase))
        assert resolver.end(session)
        assert calls == [DEFEAT]

    def test_abandon_discards_without_callbacks(self) -> None:
        calls: list[str] = []
        resolver = _resolver()
        state = GameState()
        state.resources.ember_bomb = 1
        session = resolver.start(
            WOLF, state, on_victory=lambda s: calls.append("v"), on_defeat=lambda s: calls.append("d"), bastion=WALLS
        )
        assert resolver.abandon(session)
        assert not resolver.abandon(session)
        assert resolver.fight(session) is None
        assert not resolver.use_item(session, "ember_bomb", state)
        assert not resolver.end(session)
        assert calls == []
        assert state.resources.ember_bomb == 1

    def test_reentrant_fight_raises_when_strict(self) -> None:
        resolver = _resolver(strict=True)
        session = resolver.start(WOLF, GameState(), bastion=WALLS)
        session.processing = True
        with pytest.raises(InvariantViolation):
            resolver.fight(session)

    def test_reentrant_fight_ignored_when_lenient(self) -> None:
        resolver = _resolver(strict=False)
        session = resolver.start(WOLF, GameState(), bastion=WALLS)
        session.processing = True
        assert resolver.fight(session) is None
        assert session.round == 1
        assert session.integrity == 50

    def test_latch_released_after_round(self) -> None:
        resolver = _resolver()
        session = resolver.start(WOLF, GameState(), bastion=WALLS)
        resolver.fight(session)
        assert not session.processing


class TestNeverNegative:
    def test_random_sequences(self) -> None:
        rng = Random(11)
        for trial in range(60):
            state = GameState()
            state.stats.luck = rng.randint(0, 60)
            state.stats.knowledge = rng.randint(0, 20)
            state.flags.knight_recruited = True
            state.flags.wizard_recruited = True
            state.combat_skills.crushing_strike_level = rng.randint(0, 5)
            state.combat_skills.bloodflame_sphere_level = rng.randint(0, 5)
            for item in ("ember_bomb", "ashfire_bomb", "void_bomb", "poison_arrows"):
                setattr(state.resources, item, rng.randint(0, 3))
            enemy_hp = rng.randint(1, 300)
            enemy = Enemy(name="Foe", health=enemy_hp, max_health=enemy_hp, attack=rng.randint(0, 60))
            walls = BastionStats(
                attack=rng.randint(0, 30), defense=rng.randint(0, 30), integrity=rng.randint(0, 80)
            )
            resolver = CombatResolver(rng=Random(trial), policy=InvariantPolicy(strict=True))
            session = resolver.start(enemy, state, bastion=walls)

            for _ in range(40):
                move = rng.random()
                if move < 0.2:
                    resolver.use_item(session, rng.choice(list(resolver.items)), state)
                elif move < 0.35:
                    resolver.use_skill(session, rng.choice(list(resolver.skills)), state)
                else:
                    resolver.fight(session)
                assert session.enemy_health >= 0
                assert session.integrity >= 0
                assert min(state.resources.ember_bomb, state.resources.void_bomb) >= 0
                _check_terminal(session)


def _check_terminal(session: CombatSession) -> None:
    if session.enemy_health == 0 or session.integrity == 0:
        assert session.is_terminal
