"""Tests for cinder_combat.bastion."""
from __future__ import annotations

import pytest

from cinder import GameState

from cinder_combat.bastion import calculate_bastion_stats, crit_chance, item_damage_bonus, luck_crit_chance
from cinder_combat.types import BastionStats


class TestBastionStats:
    def test_nothing_built(self) -> None:
        assert calculate_bastion_stats(GameState()) == BastionStats(0, 0, 0)

    def test_bastion_alone(self) -> None:
        state = GameState()
        state.buildings.bastion = 1
        assert calculate_bastion_stats(state) == BastionStats(attack=5, defense=10, integrity=15)

    def test_levels_are_cumulative(self) -> None:
        state = GameState()
        state.buildings.bastion = 1
        state.buildings.watchtower = 2
        state.buildings.palisades = 1
        stats = calculate_bastion_stats(state)
        assert stats.defense == 10 + 5 + 8 + 8
        assert stats.attack == 5 + 3 + 5
        assert stats.integrity == 15 + 5 + 7 + 6

    def test_fully_upgraded(self) -> None:
        state = GameState()
        state.buildings.bastion = 1
        state.buildings.watchtower = 4
        state.buildings.palisades = 4
        stats = calculate_bastion_stats(state)
        assert stats.defense == 10 + (5 + 8 + 12 + 15) + (8 + 12 + 20 + 30)
        assert stats.attack == 5 + (3 + 5 + 8 + 15)
        assert stats.integrity == 15 + (5 + 7 + 10 + 12) + (6 + 10 + 18 + 25)

    def test_strength_adds_attack(self) -> None:
        state = GameState()
        state.stats.strength = 14
        assert calculate_bastion_stats(state).attack == 2

    def test_negative_values_rejected(self) -> None:
        with pytest.raises(ValueError):
            BastionStats(attack=-1)


class TestCritChance:
    def test_luck_steps(self) -> None:
        assert luck_crit_chance(0) == 0
        assert luck_crit_chance(9) == 0
        assert luck_crit_chance(10) == 5
        assert luck_crit_chance(35) == 15
        assert luck_crit_chance(50) == 25
        assert luck_crit_chance(500) == 25

    def test_item_bonuses(self) -> None:
        state = GameState()
        state.stats.luck = 20
        assert crit_chance(state) == 10.0
        state.weapons.frostglass_sword = True
        assert crit_chance(state) == 15.0
        state.clothing.ravens_feather_cloak = True
        assert crit_chance(state) == 20.0


class TestItemBonus:
    def test_knowledge_adds_damage(self) -> None:
        state = GameState()
        assert item_damage_bonus(state) == 0
        state.stats.knowledge = 12
        assert item_damage_bonus(state) == 2
