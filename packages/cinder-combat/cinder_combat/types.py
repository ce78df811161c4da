"""Core data types for turn-based combat."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from cinder import ConfigurationError, StatePath

NOT_STARTED = "not_started"
IN_PROGRESS = "in_progress"
VICTORY = "victory"
DEFEAT = "defeat"

# Allowed phase transitions. Terminal phases have no outgoing edges.
TRANSITIONS: dict[str, tuple[str, ...]] = {
    NOT_STARTED: (IN_PROGRESS,),
    IN_PROGRESS: (VICTORY, DEFEAT),
    VICTORY: (),
    DEFEAT: (),
}


@dataclass(frozen=True)
class Enemy:
    name: str
    health: int
    max_health: int
    attack: int

    def __post_init__(self) -> None:
        if self.max_health <= 0:
            raise ValueError(f"max_health must be > 0, got {self.max_health}")
        if not 0 <= self.health <= self.max_health:
            raise ValueError(f"health must be in [0, {self.max_health}], got {self.health}")
        if self.attack < 0:
            raise ValueError(f"attack must be >= 0, got {self.attack}")


@dataclass(frozen=True)
class BastionStats:
    """Player-side combat values derived from buildings and stats."""

    attack: int = 0
    defense: int = 0
    integrity: int = 0

    def __post_init__(self) -> None:
        for name in ("attack", "defense", "integrity"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")


@dataclass(frozen=True)
class CombatItemDef:
    """Consumable combat item backed by ``resources.<id>``.

    Delayed items arm a per-round bonus instead of dealing damage on use.
    """

    id: str
    name: str
    damage: int
    max_per_combat: int
    delayed: bool = False

    def __post_init__(self) -> None:
        if self.damage < 0:
            raise ConfigurationError(f"{self.id}: damage must be >= 0")
        if self.max_per_combat < 1:
            raise ConfigurationError(f"{self.id}: max_per_combat must be >= 1")
        StatePath.parse(f"resources.{self.id}")

    @property
    def stock_path(self) -> StatePath:
        return StatePath.parse(f"resources.{self.id}")


@dataclass(frozen=True)
class SkillEffect:
    damage: int
    stun_rounds: int = 0
    burn_damage: int = 0
    burn_rounds: int = 0
    health_cost: int = 0


@dataclass(frozen=True)
class SkillDef:
    """Once-per-combat skill whose strength scales with an upgrade level.

    Tables are indexed by level starting at 0; levels past the end use the
    last entry. Optional tables may be empty, meaning zero at every level.
    """

    id: str
    name: str
    level_path: str
    damage: tuple[int, ...]
    requires: Mapping[Any, Any] = field(default_factory=dict)
    stun_rounds: tuple[int, ...] = ()
    burn_damage: tuple[int, ...] = ()
    burn_rounds: tuple[int, ...] = ()
    health_cost: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not self.damage:
            raise ConfigurationError(f"{self.id}: damage table must be non-empty")
        for name in ("stun_rounds", "burn_damage", "burn_rounds", "health_cost"):
            table = getattr(self, name)
            if table and len(table) != len(self.damage):
                raise ConfigurationError(f"{self.id}: {name} must match the damage table length")
        for name in ("damage", "stun_rounds", "burn_damage", "burn_rounds", "health_cost"):
            if any(v < 0 for v in getattr(self, name)):
                raise ConfigurationError(f"{self.id}: {name} entries must be >= 0")
        path = StatePath.parse(self.level_path)
        if not path.is_numeric:
            raise ConfigurationError(f"{self.id}: level path {path} must be numeric")
        object.__setattr__(self, "requires", {StatePath.parse(str(p)): v for p, v in self.requires.items()})

    @property
    def max_level(self) -> int:
        return len(self.damage) - 1

    def at(self, level: int) -> SkillEffect:
        i = max(0, min(level, self.max_level))

        def pick(table: tuple[int, ...]) -> int:
            return table[i] if table else 0

        return SkillEffect(
            damage=self.damage[i],
            stun_rounds=pick(self.stun_rounds),
            burn_damage=pick(self.burn_damage),
            burn_rounds=pick(self.burn_rounds),
            health_cost=pick(self.health_cost),
        )


@dataclass(frozen=True)
class RoundReport:
    """What happened during one resolved Fight round."""

    round: int
    critical: bool
    stunned: bool
    integrity_lost: int
    damage_dealt: int
    phase: str


@dataclass
class CombatSession:
    """Ephemeral state of one fight. Never persisted."""

    enemy: Enemy
    bastion: BastionStats
    enemy_health: int
    integrity: int
    max_integrity: int
    crit_chance: float = 0.0
    item_bonus: int = 0
    phase: str = NOT_STARTED
    round: int = 1
    items_this_round: set[str] = field(default_factory=set)
    item_uses: dict[str, int] = field(default_factory=dict)
    skills_used: set[str] = field(default_factory=set)
    stun_rounds: int = 0
    burn_rounds: int = 0
    burn_damage: int = 0
    poison_damage: int = 0
    processing: bool = False
    ended: bool = False
    log: list[str] = field(default_factory=list)
    on_victory: Callable[[CombatSession], None] | None = None
    on_defeat: Callable[[CombatSession], None] | None = None

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self.phase]

    @property
    def result(self) -> str | None:
        return self.phase if self.is_terminal else None
