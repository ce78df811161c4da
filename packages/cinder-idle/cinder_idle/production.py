"""Population production model: what the village makes in one 15-second cycle."""
from __future__ import annotations

from typing import TYPE_CHECKING

from cinder import population

from cinder_idle.types import CycleRates

if TYPE_CHECKING:
    from cinder import GameState

# role -> (production, consumption) per villager per cycle
ROLE_RATES: dict[str, tuple[dict[str, float], dict[str, float]]] = {
    "gatherer": ({"wood": 10, "stone": 2}, {}),
    "hunter": ({"food": 5, "fur": 1, "bones": 1}, {}),
    "tanner": ({"leather": 1}, {"fur": 2}),
    "iron_miner": ({"iron": 5}, {"food": 5}),
    "coal_miner": ({"coal": 5}, {"food": 5}),
    "sulfur_miner": ({"sulfur": 5}, {"food": 5}),
    "steel_forger": ({"steel": 1}, {"iron": 1, "coal": 1}),
}

# Upkeep paid by every villager, working or not.
UPKEEP: dict[str, float] = {"food": 1, "wood": 1}

TIMBER_MILL_WOOD_BONUS = 5
HUNTING_FOOD_PER_LEVEL = 1


def population_rates(state: GameState) -> CycleRates:
    """Per-cycle production and consumption of the current villagers."""
    production: dict[str, float] = {}
    consumption: dict[str, float] = {}

    def add(table: dict[str, float], resource: str, amount: float) -> None:
        if amount:
            table[resource] = table.get(resource, 0.0) + amount

    for role, (makes, uses) in ROLE_RATES.items():
        count = getattr(state.villagers, role)
        if count <= 0:
            continue
        for resource, amount in makes.items():
            add(production, resource, amount * count)
        for resource, amount in uses.items():
            add(consumption, resource, amount * count)

    if state.buildings.timber_mill > 0:
        add(production, "wood", TIMBER_MILL_WOOD_BONUS * state.villagers.gatherer)
    add(production, "food", HUNTING_FOOD_PER_LEVEL * state.hunting_skills.level * state.villagers.hunter)

    total = population(state)
    for resource, amount in UPKEEP.items():
        add(consumption, resource, amount * total)
    return CycleRates(production=production, consumption=consumption)
