"""Frame-ordered queue of pending resumptions."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from framestep._internal.common.types import Action


@dataclass(slots=True, frozen=True, order=True)
class PendingEntry:
    frame: int
    sequence: int
    action: Action = field(compare=False)


class PendingQueue:
    """Min-heap keyed by ``(frame, sequence)``.

    The sequence number grows with every push, so entries sharing a
    target frame come out in the order they went in. The queue itself
    is not synchronized; the scheduler guards it with its own lock.
    """

    __slots__: tuple[str, ...] = ("_counter", "_items")

    def __init__(self) -> None:
        self._items: list[PendingEntry] = []
        self._counter: itertools.count[int] = itertools.count()

    def push(self, frame: int, action: Action) -> PendingEntry:
        entry = PendingEntry(frame, next(self._counter), action)
        heapq.heappush(self._items, entry)
        return entry

    def pop_due(self, frame: int) -> PendingEntry | None:
        if not self._items or self._items[0].frame > frame:
            return None
        return heapq.heappop(self._items)

    def pop(self) -> PendingEntry | None:
        if not self._items:
            return None
        return heapq.heappop(self._items)

    def next_frame(self) -> int | None:
        if not self._items:
            return None
        return self._items[0].frame

    def __len__(self) -> int:
        return len(self._items)
