"""
Bounded log of recent turns, most recent first.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List, Sequence, Tuple

DEFAULT_CAPACITY = 10
DEFAULT_EXPOSED = 5


@dataclass(frozen=True)
class TurnHistoryEntry:
    """Human-readable record of what one actor did."""

    actor_index: int
    actor_name: str
    actions: Tuple[str, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class TurnHistory:
    """
    Ring buffer of turn history entries.

    New entries go to the front; once full, the oldest entry is evicted.
    The history is observational only and never consulted for legality.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: Deque[TurnHistoryEntry] = deque(maxlen=capacity)

    def add(self, actor_index: int, actor_name: str, actions: Sequence[str]) -> TurnHistoryEntry:
        entry = TurnHistoryEntry(actor_index, actor_name, tuple(actions))
        # appendleft on a full deque drops the rightmost (oldest) entry
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> List[TurnHistoryEntry]:
        return list(self._entries)

    def recent(self, count: int = DEFAULT_EXPOSED) -> List[TurnHistoryEntry]:
        """Get up to `count` most recent entries."""
        return list(self._entries)[: max(count, 0)]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
