"""Tracker implementation for filter match bookkeeping."""

import threading
from collections import Counter
from typing import Protocol


class IMatchTracker(Protocol):
    """Receives one notification per filter outcome."""

    def track(self, event_type: str, actor: str) -> None:
        """Record that ``actor`` (a filter id) produced ``event_type``."""
        ...


class Tracker:
    """In-memory counters keyed by (actor, event_type). Safe to share across threads."""

    def __init__(self) -> None:
        self._counts: Counter[tuple[str, str]] = Counter()
        self._lock = threading.Lock()

    def track(self, event_type: str, actor: str) -> None:
        """Increment the counter for ``actor``/``event_type``."""
        with self._lock:
            self._counts[(actor, event_type)] += 1

    def count(self, event_type: str, actor: str | None = None) -> int:
        """Return the count for one actor, or summed over all actors."""
        with self._lock:
            if actor is not None:
                return self._counts[(actor, event_type)]
            return sum(n for (_, kind), n in self._counts.items() if kind == event_type)

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Return counts grouped as {actor: {event_type: count}}."""
        grouped: dict[str, dict[str, int]] = {}
        with self._lock:
            for (actor, event_type), n in self._counts.items():
                grouped.setdefault(actor, {})[event_type] = n
        return grouped

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
