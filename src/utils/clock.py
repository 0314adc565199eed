"""
Clock abstraction - real monotonic time for hardware, simulated time for tests
"""

import heapq
import itertools
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Tuple


NS_PER_SECOND = 1_000_000_000


def _to_ns(seconds: float) -> int:
    return round(seconds * NS_PER_SECOND)


class Clock(ABC):
    """Source of time and sleeping for polling loops"""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds (arbitrary epoch, monotonic)"""
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block the caller for the given number of seconds"""
        pass


class MonotonicClock(Clock):
    """Wall-independent real clock backed by time.monotonic()"""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class SimulatedClock(Clock):
    """
    Manually driven clock with scheduled actions.

    sleep() fast-forwards instead of blocking, firing every action scheduled
    up to the new time in order. Lets tests script button presses at exact
    instants and run blocking waits without real delays.

    Example:
        clock = SimulatedClock()
        clock.call_later(0.5, sampler.press, 17)
        event = monitor.wait_for_edge(17, Edge.FALLING)   # returns at t=0.5
    """

    def __init__(self, start: float = 0.0):
        # Integer nanoseconds, so repeated poll steps never drift
        self._now_ns = _to_ns(start)
        self._scheduled: List[Tuple[int, int, Callable[..., Any], tuple]] = []
        self._counter = itertools.count()
        self._lock = threading.RLock()

    def now(self) -> float:
        return self._now_ns / NS_PER_SECOND

    def call_at(self, when: float, action: Callable[..., Any], *args) -> None:
        """
        Schedule action(*args) to run once the clock reaches `when`.

        An action that is already due runs immediately.
        """
        when_ns = _to_ns(when)
        with self._lock:
            if when_ns > self._now_ns:
                heapq.heappush(self._scheduled, (when_ns, next(self._counter), action, args))
                return
        action(*args)

    def call_later(self, delay: float, action: Callable[..., Any], *args) -> None:
        """Schedule action(*args) to run `delay` seconds from now"""
        self.call_at(self.now() + delay, action, *args)

    def advance(self, seconds: float) -> None:
        """Move time forward, running due actions at their scheduled instants"""
        with self._lock:
            step = _to_ns(seconds) if seconds > 0 else 0
            if seconds > 0 and step == 0:
                step = 1  # Sub-nanosecond sleeps still make progress
            target = self._now_ns + step
            while self._scheduled and self._scheduled[0][0] <= target:
                when_ns, _, action, args = heapq.heappop(self._scheduled)
                self._now_ns = max(self._now_ns, when_ns)
                action(*args)
            self._now_ns = target

    def sleep(self, seconds: float) -> None:
        self.advance(seconds)

    @property
    def pending_actions(self) -> int:
        return len(self._scheduled)
