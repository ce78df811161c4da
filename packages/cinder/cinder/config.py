"""Engine-wide configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CinderConfig:
    """Immutable engine configuration.

    Attributes:
        strict: Raise on invariant violations instead of clamping. Defaults to
            ``__debug__`` so optimized (``python -O``) runs degrade gracefully.
        idle_tick_seconds: Length of one production/consumption cycle.
        critical_multiplier: Player damage multiplier on a critical strike.
        log_capacity: Maximum retained narrative entries (0 for unbounded).
    """

    strict: bool = __debug__
    idle_tick_seconds: float = 15.0
    critical_multiplier: float = 1.5
    log_capacity: int = 0

    def __post_init__(self) -> None:
        if self.idle_tick_seconds <= 0:
            raise ValueError(
                f"idle_tick_seconds must be > 0, got {self.idle_tick_seconds}"
            )
        if self.critical_multiplier < 1.0:
            raise ValueError(
                f"critical_multiplier must be >= 1.0, got {self.critical_multiplier}"
            )
        if self.log_capacity < 0:
            raise ValueError(f"log_capacity must be >= 0, got {self.log_capacity}")

    @property
    def idle_tick_ms(self) -> float:
        return self.idle_tick_seconds * 1000.0

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> CinderConfig:
        """Build a config, overriding defaults from ``CINDER_*`` variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        if "CINDER_STRICT" in env:
            kwargs["strict"] = _env_flag(env["CINDER_STRICT"])
        if "CINDER_IDLE_TICK_SECONDS" in env:
            kwargs["idle_tick_seconds"] = float(env["CINDER_IDLE_TICK_SECONDS"])
        if "CINDER_LOG_CAPACITY" in env:
            kwargs["log_capacity"] = int(env["CINDER_LOG_CAPACITY"])
        return cls(**kwargs)  # type: ignore[arg-type]
