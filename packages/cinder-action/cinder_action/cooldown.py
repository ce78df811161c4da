"""CooldownTracker — wall-clock ready-at records per action id."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cinder import Millis


@dataclass(frozen=True)
class CooldownRecord:
    action_id: str
    ready_at: Millis


class CooldownTracker:
    """Ready-at timestamps keyed by action id. No counters, no stacking."""

    def __init__(self) -> None:
        self._ready_at: dict[str, Millis] = {}

    def is_ready(self, action_id: str, now: Millis) -> bool:
        """True if the action was never used or its ready-at instant has passed."""
        ready_at = self._ready_at.get(action_id)
        return ready_at is None or now >= ready_at

    def mark_used(self, action_id: str, now: Millis, cooldown_seconds: float) -> CooldownRecord:
        """Overwrite the ready-at instant with ``now + cooldown``."""
        if cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds must be >= 0, got {cooldown_seconds}")
        ready_at = now + cooldown_seconds * 1000.0
        self._ready_at[action_id] = ready_at
        return CooldownRecord(action_id=action_id, ready_at=ready_at)

    def ready_at(self, action_id: str) -> Millis | None:
        return self._ready_at.get(action_id)

    def remaining_ms(self, action_id: str, now: Millis) -> Millis:
        """Milliseconds until ready. 0 if ready."""
        ready_at = self._ready_at.get(action_id)
        if ready_at is None:
            return 0.0
        return max(0.0, ready_at - now)

    def progress(self, action_id: str, now: Millis, cooldown_seconds: float) -> float:
        """Fraction of the cooldown elapsed, 0 (just used) to 1 (ready)."""
        if cooldown_seconds <= 0:
            return 1.0
        remaining = self.remaining_ms(action_id, now)
        return max(0.0, 1.0 - remaining / (cooldown_seconds * 1000.0))

    def records(self) -> list[CooldownRecord]:
        return [CooldownRecord(action_id=k, ready_at=v) for k, v in self._ready_at.items()]

    def clear(self) -> None:
        self._ready_at.clear()

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        return {"ready_at": dict(self._ready_at)}

    def restore(self, data: dict[str, Any]) -> None:
        self._ready_at = {str(k): float(v) for k, v in data.get("ready_at", {}).items()}
