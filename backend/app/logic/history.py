"""Bounded, newest-first record of settled spins."""
from collections import deque

from app.logic.models import SpinOutcome

HISTORY_LIMIT = 25


class HistoryLog:
    """Keeps the most recent outcomes; the oldest entry falls off on overflow."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self._entries: deque[SpinOutcome] = deque(maxlen=limit)

    def record(self, outcome: SpinOutcome) -> None:
        self._entries.appendleft(outcome)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> tuple[SpinOutcome, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
