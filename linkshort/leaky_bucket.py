"""Leaky-bucket rate limiters, global and per key."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

Clock = Callable[[], float]


class LeakyBucketGlobalLimiter:
    """One bucket shared by every request."""

    def __init__(
        self, rate_per_sec: float, capacity: float, *, clock: Clock = time.monotonic
    ) -> None:
        self._rate = float(rate_per_sec)
        self._capacity = float(capacity)
        self._clock = clock
        self._lock = threading.Lock()
        self._water = 0.0
        self._last_leak = clock()

    def allow(self) -> bool:
        """Leak water for the elapsed time, then admit the request if there is room."""
        with self._lock:
            now = self._clock()
            elapsed = now - self._last_leak
            self._water = max(0.0, self._water - elapsed * self._rate)
            self._last_leak = now
            if self._water < self._capacity:
                self._water += 1
                return True
            return False


@dataclass
class _BucketState:
    water: float
    last_leak: float


class LeakyBucketKeyedLimiter:
    """A separate bucket for each key, such as a client address."""

    def __init__(
        self, rate_per_sec: float, capacity: float, *, clock: Clock = time.monotonic
    ) -> None:
        self._rate = float(rate_per_sec)
        self._capacity = float(capacity)
        self._clock = clock
        self._lock = threading.Lock()
        self._clients: dict[str, _BucketState] = {}

    def allow(self, key: str) -> bool:
        """Return True if the bucket for ``key`` has room for the request."""
        with self._lock:
            now = self._clock()
            state = self._clients.get(key)
            if state is None:
                state = self._clients[key] = _BucketState(water=0.0, last_leak=now)
            elapsed = now - state.last_leak
            state.water = max(0.0, state.water - elapsed * self._rate)
            state.last_leak = now
            if state.water < self._capacity:
                state.water += 1
                return True
            return False