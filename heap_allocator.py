from __future__ import annotations

import heapq
from typing import Optional

from models import Slot


class SlotHeap:
    """
    Min-heap of free slots for one vehicle category.
    Entries are (sequence, slot), so pop_nearest always yields the
    lowest-numbered free slot.
    Keyed by the integer sequence rather than the display id, so "C-100"
    never sorts ahead of "C-99" once ids outgrow their zero padding.

    Entries whose slot became occupied behind the heap's back are stale;
    they are discarded on pop (lazy deletion).
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, Slot]] = []

    def add_slot(self, slot: Slot) -> None:
        if slot.occupied:
            return
        heapq.heappush(self._heap, (slot.sequence, slot))

    def pop_nearest(self) -> Optional[Slot]:
        while self._heap:
            _, slot = heapq.heappop(self._heap)
            if not slot.occupied:
                return slot
            # stale
        return None

    def size(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return self.size() == 0
