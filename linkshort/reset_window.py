"""A per-key limiter whose count is cleared by a timer after each window."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import timedelta

Scheduler = Callable[[float, Callable[[], None]], None]


def _start_timer(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class ResettingWindowLimiter:
    """Counts requests per key; the first request for a key schedules its reset."""

    def __init__(
        self,
        limit: int,
        window: timedelta | float | int,
        *,
        schedule: Scheduler = _start_timer,
    ) -> None:
        self._limit = limit
        self._window = window if isinstance(window, timedelta) else timedelta(seconds=window)
        self._schedule = schedule
        self._lock = threading.Lock()
        self._clients: dict[str, int] = {}

    def allow(self, ip: str) -> tuple[bool, timedelta]:
        """Return whether ``ip`` may proceed and how long to wait if not."""
        with self._lock:
            count = self._clients.get(ip)
            if count is not None and count >= self._limit:
                return False, self._window
            self._clients[ip] = (count or 0) + 1
            new_key = count is None
        if new_key:
            self._schedule(self._window.total_seconds(), lambda: self._reset(ip))
        return True, timedelta(0)

    def _reset(self, ip: str) -> None:
        with self._lock:
            self._clients.pop(ip, None)