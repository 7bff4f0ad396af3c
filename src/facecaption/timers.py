from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(order=True)
class TimerHandle:
    deadline: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """
    Deferred callbacks on the caller's thread.

    Nothing fires on its own: the owner calls `run_due()` from its main loop
    (once per frame), so a timer never interrupts a handler that is running.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._heap: List[TimerHandle] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(deadline=self._clock() + delay_s, seq=next(self._seq), callback=callback)
        heapq.heappush(self._heap, handle)
        return handle

    def run_due(self) -> int:
        """Fire every callback whose deadline has passed, oldest first. Returns how many fired."""
        fired = 0
        while self._heap:
            head = self._heap[0]
            if head.cancelled:
                heapq.heappop(self._heap)
                continue
            if head.deadline > self._clock():
                break
            heapq.heappop(self._heap)
            # Marked before the call so a callback that re-arms its own slot doesn't cancel itself.
            head.cancelled = True
            head.callback()
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for h in self._heap if not h.cancelled)


class ScheduledCallback:
    """A named timer slot: arming it supersedes whatever was armed before."""

    def __init__(self, scheduler: Scheduler, name: str) -> None:
        self._scheduler = scheduler
        self.name = name
        self._handle: Optional[TimerHandle] = None

    def arm(self, delay_s: float, callback: Callable[[], None]) -> None:
        self.cancel()
        self._handle = self._scheduler.call_later(delay_s, callback)
        logger.debug("armed %s timer (%.2fs)", self.name, delay_s)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def armed(self) -> bool:
        return self._handle is not None and not self._handle.cancelled
