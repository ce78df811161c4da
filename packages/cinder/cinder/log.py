"""Narrative log entries and the append-only log handed to the UI."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

LOG_CATEGORIES = ("system", "action", "event", "production", "combat")


@dataclass(frozen=True)
class LogEntry:
    id: str
    message: str
    timestamp: float
    category: str = "system"

    def __post_init__(self) -> None:
        if self.category not in LOG_CATEGORIES:
            raise ValueError(f"unknown log category {self.category!r}")


def make_entry(key: str, message: str, now: float, category: str = "system") -> LogEntry:
    """Build an entry whose id is stable for a given key and timestamp."""
    return LogEntry(id=f"{key}-{int(now)}", message=message, timestamp=now, category=category)


class NarrativeLog:
    def __init__(self, max_entries: int = 0) -> None:
        maxlen = max_entries if max_entries > 0 else None
        self._entries: deque[LogEntry] = deque(maxlen=maxlen)

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def extend(self, entries: list[LogEntry]) -> None:
        self._entries.extend(entries)

    def query(self, category: str | None = None, after: float | None = None) -> list[LogEntry]:
        result = list(self._entries)
        if category is not None:
            result = [e for e in result if e.category == category]
        if after is not None:
            result = [e for e in result if e.timestamp > after]
        return result

    def last(self, category: str | None = None) -> LogEntry | None:
        for e in reversed(self._entries):
            if category is None or e.category == category:
                return e
        return None

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> list[dict[str, Any]]:
        return [
            {"id": e.id, "message": e.message, "timestamp": e.timestamp, "category": e.category}
            for e in self._entries
        ]

    def restore(self, data: list[dict[str, Any]]) -> None:
        self._entries.clear()
        for d in data:
            self._entries.append(LogEntry(**d))

    def __len__(self) -> int:
        return len(self._entries)
