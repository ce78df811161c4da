"""Game state aggregate and typed dotted-path access."""

from __future__ import annotations

import copy
import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterator

from cinder.types import ConfigurationError, Scalar

logger = logging.getLogger(__name__)


@dataclass
class Resources:
    wood: int = 0
    stone: int = 0
    food: int = 0
    bones: int = 0
    fur: int = 0
    leather: int = 0
    iron: int = 0
    coal: int = 0
    sulfur: int = 0
    steel: int = 0
    gold: int = 0
    torch: int = 0
    bone_totem: int = 0
    ember_bomb: int = 0
    ashfire_bomb: int = 0
    void_bomb: int = 0
    poison_arrows: int = 0


@dataclass
class Buildings:
    hut: int = 0
    cabin: int = 0
    blacksmith: int = 0
    foundry: int = 0
    timber_mill: int = 0
    quarry: int = 0
    tannery: int = 0
    altar: int = 0
    bastion: int = 0
    watchtower: int = 0
    palisades: int = 0


@dataclass
class Tools:
    stone_axe: bool = False
    stone_pickaxe: bool = False
    iron_axe: bool = False
    iron_pickaxe: bool = False
    steel_axe: bool = False
    steel_pickaxe: bool = False


@dataclass
class Weapons:
    crude_bow: bool = False
    iron_sword: bool = False
    frostglass_sword: bool = False


@dataclass
class Clothing:
    fur_cloak: bool = False
    ravens_feather_cloak: bool = False


@dataclass
class Flags:
    fire_lit: bool = False
    cave_explored: bool = False
    village_unlocked: bool = False
    forest_unlocked: bool = False
    knight_recruited: bool = False
    wizard_recruited: bool = False


@dataclass
class Villagers:
    free: int = 0
    gatherer: int = 0
    hunter: int = 0
    tanner: int = 0
    iron_miner: int = 0
    coal_miner: int = 0
    sulfur_miner: int = 0
    steel_forger: int = 0


@dataclass
class Stats:
    luck: int = 0
    strength: int = 0
    knowledge: int = 0


@dataclass
class CombatSkills:
    crushing_strike_level: int = 0
    bloodflame_sphere_level: int = 0


@dataclass
class SleepUpgrades:
    length_level: int = 0
    intensity_level: int = 0


@dataclass
class HuntingSkills:
    level: int = 0


@dataclass
class Story:
    seen: dict[str, bool] = field(default_factory=dict)


@dataclass
class GameState:
    """Single mutable aggregate owned by one running game session."""

    resources: Resources = field(default_factory=Resources)
    buildings: Buildings = field(default_factory=Buildings)
    tools: Tools = field(default_factory=Tools)
    weapons: Weapons = field(default_factory=Weapons)
    clothing: Clothing = field(default_factory=Clothing)
    flags: Flags = field(default_factory=Flags)
    villagers: Villagers = field(default_factory=Villagers)
    stats: Stats = field(default_factory=Stats)
    combat_skills: CombatSkills = field(default_factory=CombatSkills)
    sleep_upgrades: SleepUpgrades = field(default_factory=SleepUpgrades)
    hunting_skills: HuntingSkills = field(default_factory=HuntingSkills)
    story: Story = field(default_factory=Story)
    counters: dict[str, int] = field(default_factory=dict)

    def copy(self) -> GameState:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        """Rebuild from ``to_dict`` output, merging defaults for missing keys.

        Unknown namespaces and fields are dropped so older saves keep loading.
        Values of the wrong kind and negative numbers raise ConfigurationError.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"state must be a mapping, got {type(data).__name__}")
        state = cls()
        for name, ns_type in _CLOSED_NAMESPACES.items():
            values = _mapping(data, name)
            kinds = _KINDS[name]
            unknown = set(values) - set(kinds)
            if unknown:
                logger.debug("dropping unknown %s fields: %s", name, sorted(unknown))
            ns = ns_type(**{
                k: _checked(f"{name}.{k}", v, kinds[k]) for k, v in values.items() if k in kinds
            })
            setattr(state, name, ns)
        seen = _mapping(_mapping(data, "story"), "seen")
        state.story = Story(seen={str(k): _checked(f"story.seen.{k}", v, bool) for k, v in seen.items()})
        state.counters = {
            str(k): _checked(f"counters.{k}", v, int) for k, v in _mapping(data, "counters").items()
        }
        return state


def _mapping(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{name} must be a mapping, got {type(value).__name__}")
    return value


def _checked(where: str, value: Any, kind: type) -> Scalar:
    """Validate a loaded value against its field kind."""
    if kind is bool:
        if not isinstance(value, bool):
            raise ConfigurationError(f"{where} must be a bool, got {value!r}")
        return value
    # JSON may hand back 3.0 for 3; anything fractional is corrupt.
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or value != int(value)
    ):
        raise ConfigurationError(f"{where} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{where} must be >= 0, got {value}")
    return int(value)


_CLOSED_NAMESPACES: dict[str, type] = {
    "resources": Resources,
    "buildings": Buildings,
    "tools": Tools,
    "weapons": Weapons,
    "clothing": Clothing,
    "flags": Flags,
    "villagers": Villagers,
    "stats": Stats,
    "combat_skills": CombatSkills,
    "sleep_upgrades": SleepUpgrades,
    "hunting_skills": HuntingSkills,
}

# Dict-valued namespaces accept any identifier key of the given kind.
_OPEN_NAMESPACES: dict[str, type] = {
    "story.seen": bool,
    "counters": int,
}


def _field_kinds(ns_type: type) -> dict[str, type]:
    return {f.name: type(f.default) for f in dataclasses.fields(ns_type)}


_KINDS: dict[str, dict[str, type]] = {
    name: _field_kinds(ns_type) for name, ns_type in _CLOSED_NAMESPACES.items()
}


@dataclass(frozen=True)
class StatePath:
    """A dotted path validated against the ``GameState`` schema.

    Attributes:
        namespace: Dotted namespace, e.g. ``"resources"`` or ``"story.seen"``.
        key: Field (or open-namespace key) within the namespace.
        kind: ``int`` or ``bool``.
        open: True when the namespace is a dict that accepts arbitrary keys.
    """

    namespace: str
    key: str
    kind: type
    open: bool = False

    def __str__(self) -> str:
        return f"{self.namespace}.{self.key}"

    @property
    def zero(self) -> Scalar:
        return False if self.kind is bool else 0

    @property
    def is_numeric(self) -> bool:
        return self.kind is not bool

    @classmethod
    def parse(cls, text: str) -> StatePath:
        """Resolve *text* against the schema. Raises ConfigurationError if unknown."""
        cached = _PATH_CACHE.get(text)
        if cached is not None:
            return cached
        namespace, _, key = text.rpartition(".")
        if not namespace or not key:
            raise ConfigurationError(f"Malformed state path {text!r}")
        if namespace in _OPEN_NAMESPACES:
            if not key.isidentifier():
                raise ConfigurationError(f"Invalid key {key!r} in state path {text!r}")
            path = cls(namespace, key, _OPEN_NAMESPACES[namespace], open=True)
        elif namespace in _KINDS:
            kinds = _KINDS[namespace]
            if key not in kinds:
                raise ConfigurationError(f"Unknown field {key!r} in state path {text!r}")
            path = cls(namespace, key, kinds[key])
        else:
            raise ConfigurationError(f"Unknown namespace {namespace!r} in state path {text!r}")
        _PATH_CACHE[text] = path
        return path


_PATH_CACHE: dict[str, StatePath] = {}


def as_path(path: StatePath | str) -> StatePath:
    return path if isinstance(path, StatePath) else StatePath.parse(path)


def _container(state: GameState, namespace: str) -> Any:
    obj: Any = state
    for part in namespace.split("."):
        obj = getattr(obj, part)
    return obj


def get_value(state: GameState, path: StatePath | str) -> Scalar:
    """Read a path. Absent open-namespace keys read as the kind's zero."""
    p = as_path(path)
    container = _container(state, p.namespace)
    if p.open:
        return container.get(p.key, p.zero)
    return getattr(container, p.key)


def set_value(state: GameState, path: StatePath | str, value: Scalar) -> None:
    """Write a path, coercing the value to the path's kind."""
    p = as_path(path)
    coerced: Scalar = bool(value) if p.kind is bool else int(value)
    container = _container(state, p.namespace)
    if p.open:
        container[p.key] = coerced
    else:
        setattr(container, p.key, coerced)


def iter_paths(*namespaces: str) -> Iterator[StatePath]:
    """Yield every closed-namespace path, optionally limited to *namespaces*."""
    for name, kinds in _KINDS.items():
        if namespaces and name not in namespaces:
            continue
        for key in kinds:
            yield StatePath.parse(f"{name}.{key}")


def population(state: GameState) -> int:
    """Total villagers across all roles, free ones included."""
    return sum(getattr(state.villagers, f.name) for f in dataclasses.fields(Villagers))
