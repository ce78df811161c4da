"""Tests for the population production model."""
from __future__ import annotations

import pytest

from cinder import ConfigurationError, GameState

from cinder_idle.production import population_rates
from cinder_idle.types import CycleRates


class TestCycleRates:
    def test_net_combines(self) -> None:
        rates = CycleRates(production={"wood": 10, "food": 2}, consumption={"food": 2, "iron": 1})
        assert rates.net() == {"wood": 10, "iron": -1}

    def test_negative_rate_rejected(self) -> None:
        with pytest.raises(ValueError):
            CycleRates(production={"wood": -1})

    def test_unknown_resource_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            CycleRates(production={"mithril": 1})


class TestPopulationRates:
    def test_empty_village(self) -> None:
        assert population_rates(GameState()).net() == {}

    def test_upkeep_for_idle_villagers(self) -> None:
        state = GameState()
        state.villagers.free = 3
        assert population_rates(state).net() == {"food": -3, "wood": -3}

    def test_roles_and_bonuses(self) -> None:
        state = GameState()
        state.villagers.gatherer = 2
        state.villagers.hunter = 1
        state.buildings.timber_mill = 1
        state.hunting_skills.level = 2
        rates = population_rates(state)
        assert rates.production == {"wood": 30, "stone": 4, "food": 7, "fur": 1, "bones": 1}
        assert rates.consumption == {"food": 3, "wood": 3}

    def test_forgers_use_iron_and_coal(self) -> None:
        state = GameState()
        state.villagers.steel_forger = 2
        net = population_rates(state).net()
        assert net["steel"] == 2
        assert net["iron"] == -2
        assert net["coal"] == -2
