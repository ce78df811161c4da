"""Core data types for idle (sleep) progress."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from cinder import Millis, StatePath

# Indexed by upgrade level; levels past the end use the last entry.
SLEEP_LENGTH_HOURS: tuple[float, ...] = (4, 6, 8, 10, 12, 16)
SLEEP_INTENSITY_PERCENT: tuple[float, ...] = (10, 12.5, 15, 17.5, 20, 25)


@dataclass(frozen=True)
class CycleRates:
    """Per-cycle production and consumption, keyed by resource name.

    Both maps hold non-negative magnitudes. ``net`` combines them into signed
    per-cycle deltas.
    """

    production: Mapping[str, float] = field(default_factory=dict)
    consumption: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for table in (self.production, self.consumption):
            for resource, amount in table.items():
                StatePath.parse(f"resources.{resource}")
                if amount < 0:
                    raise ValueError(f"rate for {resource} must be >= 0, got {amount}")
        object.__setattr__(self, "production", dict(self.production))
        object.__setattr__(self, "consumption", dict(self.consumption))

    def net(self) -> dict[str, float]:
        out: dict[str, float] = {}
        for resource, amount in self.production.items():
            out[resource] = out.get(resource, 0.0) + amount
        for resource, amount in self.consumption.items():
            out[resource] = out.get(resource, 0.0) - amount
        return {r: v for r, v in out.items() if v != 0}


@dataclass
class IdleSession:
    """An active sleep.

    Only ``start_time`` and ``is_active`` are durable. The rest is resolved
    from the state model at start or resume.
    """

    start_time: Millis
    is_active: bool = True
    duration_ms: Millis = 0.0
    intensity: float = 0.0
    rates: CycleRates | None = None
    last_update: Millis | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"start_time": self.start_time, "is_active": self.is_active}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IdleSession:
        return cls(start_time=float(data["start_time"]), is_active=bool(data["is_active"]))


@dataclass(frozen=True)
class IdleProgress:
    """Result of ``resume``: capped elapsed seconds and the totals so far."""

    elapsed_seconds: float
    accumulated: dict[str, float]
