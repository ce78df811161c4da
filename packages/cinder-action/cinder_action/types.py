"""Core data types for declarative actions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from cinder import ConfigurationError, StatePath


@dataclass(frozen=True)
class Computed:
    """Reference to a named pure function of state, resolved via ``Formulas``."""

    formula: str


@dataclass(frozen=True)
class SetTo:
    """Overwrite the target path with a literal instead of adding a delta."""

    value: int | bool


@dataclass(frozen=True)
class RandomRange:
    """Uniform integer delta in ``[low, high]``."""

    low: int
    high: int

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ConfigurationError(f"RandomRange low {self.low} > high {self.high}")


@dataclass(frozen=True)
class Chance:
    """Luck-adjusted probabilistic effect.

    The effective probability is ``probability * (1 + luck / 100)``, capped at 1.
    """

    probability: float
    value: int | bool | RandomRange
    log_message: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.probability <= 1.0:
            raise ConfigurationError(
                f"probability must be in [0, 1], got {self.probability}"
            )


@dataclass(frozen=True)
class Narrative:
    """One-time message gated by ``story.seen.<seen_key>``."""

    seen_key: str
    message: str

    def __post_init__(self) -> None:
        if not self.seen_key.isidentifier():
            raise ConfigurationError(f"invalid narrative key {self.seen_key!r}")

    @property
    def path(self) -> StatePath:
        return StatePath.parse(f"story.seen.{self.seen_key}")


Requirement = Union[bool, int, Computed]
Amount = Union[int, Computed]
Effect = Union[int, bool, SetTo, RandomRange, Chance, Computed]

Conditions = dict[StatePath, Requirement]
Costs = dict[StatePath, Amount]
Effects = dict[StatePath, Effect]


def _levelled(table: Mapping[Any, Any], action_id: str, name: str) -> dict[int, dict[str, Any]]:
    """Normalize a flat or level-indexed table to ``{level: {path: value}}``."""
    if not table:
        return {}
    int_keys = [k for k in table if isinstance(k, int) and not isinstance(k, bool)]
    if len(int_keys) == len(table):
        return {level: dict(table[level]) for level in sorted(int_keys)}
    if int_keys:
        raise ConfigurationError(
            f"{action_id}: {name} mixes level keys and path keys"
        )
    return {1: dict(table)}


def _check_effect(action_id: str, path: StatePath, effect: Any) -> None:
    if isinstance(effect, Chance):
        inner = effect.value
        if isinstance(inner, bool) != (path.kind is bool):
            raise ConfigurationError(
                f"{action_id}: chance value for {path} does not match its kind"
            )
        return
    if isinstance(effect, SetTo):
        if isinstance(effect.value, bool) != (path.kind is bool):
            raise ConfigurationError(f"{action_id}: SetTo value for {path} does not match its kind")
        return
    if isinstance(effect, Computed):
        return
    if isinstance(effect, bool):
        if path.kind is not bool:
            raise ConfigurationError(f"{action_id}: boolean effect on numeric path {path}")
        return
    if isinstance(effect, (int, RandomRange)):
        if path.kind is bool:
            raise ConfigurationError(f"{action_id}: numeric effect on boolean path {path}")
        return
    raise ConfigurationError(f"{action_id}: unsupported effect {effect!r} on {path}")


@dataclass(frozen=True)
class ActionDef:
    """Immutable action definition.

    ``show_when``, ``cost`` and ``effects`` accept either a flat
    ``{path: value}`` map (an action with the single level 1) or a
    level-indexed ``{level: {path: value}}`` map. Building actions name the
    ``buildings`` field whose next level selects the table row.

    Attributes:
        id: Unique identifier.
        label: Display label, literal or computed.
        show_when: Visibility/precondition requirements.
        cost: Non-negative amounts deducted on execution.
        effects: Deltas, literals and probabilistic effects applied on execution.
        unlocks: Ids of actions this one leads to. Informational.
        cooldown: Seconds before the action may fire again.
        building: ``buildings`` field driving the level, if any.
        narrative: One-time messages emitted on execution.
    """

    id: str
    label: str | Computed = ""
    show_when: Mapping[Any, Any] = field(default_factory=dict)
    cost: Mapping[Any, Any] = field(default_factory=dict)
    effects: Mapping[Any, Any] = field(default_factory=dict)
    unlocks: tuple[str, ...] = ()
    cooldown: float = 0.0
    building: str | None = None
    narrative: tuple[Narrative, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("ActionDef id must be non-empty")
        if self.cooldown < 0:
            raise ConfigurationError(f"{self.id}: cooldown must be >= 0, got {self.cooldown}")
        if self.building is not None:
            bpath = StatePath.parse(f"buildings.{self.building}")
            if bpath.kind is bool:
                raise ConfigurationError(f"{self.id}: building field must be numeric")

        show_when = {
            level: {StatePath.parse(p): v for p, v in row.items()}
            for level, row in _levelled(self.show_when, self.id, "show_when").items()
        }
        cost = {
            level: {StatePath.parse(p): v for p, v in row.items()}
            for level, row in _levelled(self.cost, self.id, "cost").items()
        }
        effects = {
            level: {StatePath.parse(p): v for p, v in row.items()}
            for level, row in _levelled(self.effects, self.id, "effects").items()
        }

        for row in cost.values():
            for path, amount in row.items():
                if path.kind is bool:
                    raise ConfigurationError(f"{self.id}: cost on boolean path {path}")
                if isinstance(amount, bool) or not isinstance(amount, (int, Computed)):
                    raise ConfigurationError(f"{self.id}: invalid cost {amount!r} for {path}")
                if isinstance(amount, int) and amount < 0:
                    raise ConfigurationError(f"{self.id}: cost for {path} must be >= 0")
        for row in show_when.values():
            for path, required in row.items():
                if not isinstance(required, (bool, int, Computed)):
                    raise ConfigurationError(f"{self.id}: invalid requirement {required!r} for {path}")
        for row in effects.values():
            for path, effect in row.items():
                _check_effect(self.id, path, effect)

        levels = set(show_when) | set(cost) | set(effects)
        if levels and sorted(levels) != list(range(1, len(levels) + 1)):
            raise ConfigurationError(f"{self.id}: levels must run 1..n, got {sorted(levels)}")
        if self.building is None and levels - {1}:
            raise ConfigurationError(f"{self.id}: only building actions may define levels > 1")
        for name, table in (("show_when", show_when), ("cost", cost), ("effects", effects)):
            if table and set(table) != levels:
                missing = sorted(levels - set(table))
                raise ConfigurationError(f"{self.id}: {name} is missing levels {missing}")

        object.__setattr__(self, "show_when", show_when)
        object.__setattr__(self, "cost", cost)
        object.__setattr__(self, "effects", effects)
        object.__setattr__(self, "unlocks", tuple(self.unlocks))
        object.__setattr__(self, "narrative", tuple(self.narrative))
        object.__setattr__(self, "_levels", frozenset(levels) or frozenset({1}))

    @property
    def levels(self) -> frozenset[int]:
        return self._levels  # type: ignore[attr-defined]

    @property
    def max_level(self) -> int:
        return max(self.levels)

    def has_level(self, level: int) -> bool:
        return level in self.levels

    def computed_refs(self) -> list[str]:
        """Names of every formula this definition references."""
        refs: list[str] = []
        if isinstance(self.label, Computed):
            refs.append(self.label.formula)
        for table in (self.show_when, self.cost, self.effects):
            for row in table.values():
                for value in row.values():
                    if isinstance(value, Computed):
                        refs.append(value.formula)
        return refs
