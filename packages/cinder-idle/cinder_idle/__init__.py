"""Idle (sleep) progress: production accrued while the player is away."""
from cinder_idle.production import ROLE_RATES, UPKEEP, population_rates
from cinder_idle.simulator import IdleSimulator, sleep_duration_ms, sleep_intensity
from cinder_idle.types import (
    SLEEP_INTENSITY_PERCENT,
    SLEEP_LENGTH_HOURS,
    CycleRates,
    IdleProgress,
    IdleSession,
)

__all__ = [
    "CycleRates",
    "IdleProgress",
    "IdleSession",
    "IdleSimulator",
    "ROLE_RATES",
    "SLEEP_INTENSITY_PERCENT",
    "SLEEP_LENGTH_HOURS",
    "UPKEEP",
    "population_rates",
    "sleep_duration_ms",
    "sleep_intensity",
]
