"""cinder - State model and shared primitives for the cinder rule engine."""

from cinder.clock import ManualClock, WallClock
from cinder.config import CinderConfig
from cinder.invariants import InvariantPolicy
from cinder.log import LogEntry, NarrativeLog, make_entry
from cinder.state import (
    GameState,
    StatePath,
    as_path,
    get_value,
    iter_paths,
    population,
    set_value,
)
from cinder.types import ConfigurationError, InvariantViolation, Millis, Scalar, SnapshotError

__all__ = [
    "CinderConfig",
    "ConfigurationError",
    "GameState",
    "InvariantPolicy",
    "InvariantViolation",
    "LogEntry",
    "ManualClock",
    "Millis",
    "NarrativeLog",
    "Scalar",
    "SnapshotError",
    "StatePath",
    "WallClock",
    "as_path",
    "get_value",
    "iter_paths",
    "make_entry",
    "population",
    "set_value",
]
