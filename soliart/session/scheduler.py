"""
Schedulers - "Run this callback once after a delay."

The engine never waits on a clock. It returns ScheduledEffects and the
runtime hands them to one of these.
"""

from __future__ import annotations
import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Fire-and-forget delayed callbacks."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once, ``delay`` seconds from now."""
        pass

    def cancel_all(self) -> None:
        """Drop every callback that has not fired yet."""
        pass


class ThreadingScheduler(Scheduler):
    """Wall-clock scheduler backed by daemon ``threading.Timer`` threads."""

    def __init__(self):
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        timer: threading.Timer

        def run():
            with self._lock:
                self._timers.discard(timer)
            callback()

        timer = threading.Timer(delay, run)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def cancel_all(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, set()
        for timer in timers:
            timer.cancel()


class ManualScheduler(Scheduler):
    """
    Virtual-clock scheduler.

    Nothing fires until ``advance`` moves the clock past a callback's due
    time. Callbacks due at the same time fire in scheduling order.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback))

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing everything now due. Returns how many fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            fired += 1
        self.now = target
        return fired

    @property
    def pending(self) -> int:
        return len(self._queue)

    def cancel_all(self) -> None:
        self._queue.clear()
