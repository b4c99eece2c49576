"""
Bounded in-memory search history.
"""
from collections import deque

from vault.models.logs import SearchLogEntry


class SearchLogBook:
    """
    Newest-first log of searches, capped at ``capacity`` entries.

    Once full, appending drops the oldest entry.
    """

    def __init__(self, capacity: int = 1000):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: deque[SearchLogEntry] = deque(maxlen=capacity)

    def append(self, entry: SearchLogEntry) -> None:
        self._entries.appendleft(entry)

    def recent(self, limit: int = 100) -> list[SearchLogEntry]:
        """Most recent entries first."""
        if limit <= 0:
            return []
        return list(self._entries)[:limit]

    def __len__(self) -> int:
        return len(self._entries)
