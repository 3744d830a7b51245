"""Token-bucket rate limiting and a per-client WSGI middleware."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import Any

from werkzeug.wrappers import Response

Clock = Callable[[], float]
WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


def _seconds(value: timedelta | float | int) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


class TokenBucket:
    """Holds up to ``capacity`` tokens, refilled at ``rate`` tokens per second."""

    def __init__(self, rate: int, capacity: int, *, clock: Clock = time.monotonic) -> None:
        self._capacity = capacity
        self._tokens = capacity
        self._rate = rate
        self._clock = clock
        self._last_refill = clock()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        self._last_refill = now
        new_tokens = int(elapsed * self._rate)
        if new_tokens > 0:
            self._tokens = min(self._capacity, self._tokens + new_tokens)

    def allow(self) -> bool:
        """Take one token if there is one."""
        with self._lock:
            self._refill()
            if self._tokens > 0:
                self._tokens -= 1
                return True
            return False


def client_ip(environ: dict) -> str:
    """Return the client address, preferring the first X-Forwarded-For entry."""
    forwarded = environ.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return environ.get("REMOTE_ADDR", "")


class IPRateLimiter:
    """One token bucket per client address; idle buckets are dropped periodically."""

    def __init__(
        self,
        rate: int,
        capacity: int,
        cleanup_interval: timedelta | float | int,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        self._rate = rate
        self._capacity = capacity
        self._cleanup = _seconds(cleanup_interval)
        self._clock = clock
        self._lock = threading.Lock()
        self._limiters: dict[str, TokenBucket] = {}
        self._last_seen: dict[str, float] = {}
        self._stop = threading.Event()
        self._worker = threading.Thread(target=self._run_cleanup, daemon=True)
        self._worker.start()

    def _run_cleanup(self) -> None:
        while not self._stop.wait(self._cleanup):
            self.cleanup_old_entries()

    def get_limiter(self, ip: str) -> TokenBucket:
        """Return the bucket for ``ip``, creating it when needed."""
        with self._lock:
            self._last_seen[ip] = self._clock()
            bucket = self._limiters.get(ip)
            if bucket is None:
                bucket = self._limiters[ip] = TokenBucket(
                    self._rate, self._capacity, clock=self._clock
                )
            return bucket

    def cleanup_old_entries(self) -> None:
        """Drop buckets not used for longer than the cleanup interval."""
        with self._lock:
            now = self._clock()
            stale = [ip for ip, seen in self._last_seen.items() if now - seen > self._cleanup]
            for ip in stale:
                self._limiters.pop(ip, None)
                del self._last_seen[ip]

    def middleware(self, app: WSGIApp) -> WSGIApp:
        """Wrap a WSGI app so each client is limited by its own bucket."""

        def limited(environ: dict, start_response: Any) -> Iterable[bytes]:
            if not self.get_limiter(client_ip(environ)).allow():
                response = Response(
                    "Too Many Requests\n",
                    status=429,
                    content_type="text/plain; charset=utf-8",
                    headers={"X-Content-Type-Options": "nosniff"},
                )
                return response(environ, start_response)
            return app(environ, start_response)

        return limited

    def close(self) -> None:
        """Stop the background cleanup."""
        self._stop.set()
        if self._worker is not threading.current_thread():
            self._worker.join()