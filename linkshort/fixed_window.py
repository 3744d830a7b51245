"""Fixed-window rate limiters, global and per key."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

Clock = Callable[[], float]


def _seconds(value: timedelta | float | int) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


class FixedWindowGlobalLimiter:
    """One counter and window shared by every request."""

    def __init__(
        self,
        limit: int,
        window: timedelta | float | int,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        self._limit = limit
        self._window = _seconds(window)
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._window_ends = clock() + self._window

    def allow(self) -> bool:
        """Return True if a request fits in the current window."""
        with self._lock:
            now = self._clock()
            if now > self._window_ends:
                self._count = 1
                self._window_ends = now + self._window
                return True
            if self._count < self._limit:
                self._count += 1
                return True
            return False


@dataclass
class _Visit:
    count: int
    window_end: float


class FixedWindowKeyedLimiter:
    """A separate counter and window for each key, such as a client address."""

    def __init__(
        self,
        limit: int,
        window: timedelta | float | int,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        self._limit = limit
        self._window = _seconds(window)
        self._clock = clock
        self._lock = threading.Lock()
        self._visits: dict[str, _Visit] = {}

    def allow(self, key: str) -> bool:
        """Return True if a request for ``key`` fits in its window.

        Expired keys are dropped on every call.
        """
        with self._lock:
            now = self._clock()
            self._visits = {
                k: visit for k, visit in self._visits.items() if not now > visit.window_end
            }
            visit = self._visits.get(key)
            if visit is None:
                self._visits[key] = _Visit(count=1, window_end=now + self._window)
                return True
            if visit.count < self._limit:
                visit.count += 1
                return True
            return False