"""Sliding-window rate limiters, global and per key."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import timedelta

Clock = Callable[[], float]


def _seconds(value: timedelta | float | int) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


def _recent(timestamps: list[float], threshold: float) -> list[float]:
    return [ts for ts in timestamps if ts > threshold]


class SlidingWindowGlobalLimiter:
    """At most ``limit`` requests from anyone within any window."""

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
        self._timestamps: list[float] = []

    def allow(self) -> bool:
        """Return True if fewer than ``limit`` requests fall in the last window."""
        with self._lock:
            now = self._clock()
            self._timestamps = _recent(self._timestamps, now - self._window)
            if len(self._timestamps) < self._limit:
                self._timestamps.append(now)
                return True
            return False


class SlidingWindowKeyedLimiter:
    """At most ``limit`` requests per key within any window."""

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
        self._clients: dict[str, list[float]] = {}

    def allow(self, key: str) -> bool:
        """Return True if ``key`` made fewer than ``limit`` requests in the last window."""
        with self._lock:
            now = self._clock()
            timestamps = _recent(self._clients.get(key, []), now - self._window)
            if len(timestamps) < self._limit:
                timestamps.append(now)
                self._clients[key] = timestamps
                return True
            return False