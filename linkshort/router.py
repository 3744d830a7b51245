"""The application's top-level WSGI router."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Iterable
from typing import Any

from werkzeug.wrappers import Request, Response

from .handler import Handler
from .logs import get_logger
from .middleware import WSGIApp, chain, rate_limiter, recovery, request_logger

DEFAULT_RATE = 2.0
DEFAULT_BURST = 5


class _SteadyRate:
    """Token bucket with fractional refill: ``rate`` tokens per second, ``burst`` at most."""

    def __init__(self, rate: float, burst: int) -> None:
        self._rate = rate
        self._burst = float(burst)
        self._tokens = float(burst)
        self._last = time.monotonic()
        self._lock = threading.Lock()

    def allow(self) -> bool:
        with self._lock:
            now = time.monotonic()
            self._tokens = min(self._burst, self._tokens + (now - self._last) * self._rate)
            self._last = now
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False


def _health(request: Request) -> Response:
    get_logger().info(
        "Health check request received method=%s path=%s", request.method, request.path
    )
    return Response(
        json.dumps({"status": "OK"}) + "\n", status=200, content_type="application/json"
    )


def create_app(handler: Handler, limiter: Any = None) -> WSGIApp:
    """Build the WSGI app: handler routes, health and panic routes, and middleware.

    ``limiter`` needs an ``allow()`` method; by default it admits 2 requests
    per second with bursts of 5.
    """

    def routes(environ: dict, start_response: Any) -> Iterable[bytes]:
        request = Request(environ)
        if request.method in ("GET", "HEAD"):
            if request.path == "/health":
                return _health(request)(environ, start_response)
            if request.path == "/panic":
                raise RuntimeError("something went wrong!")
        return handler(environ, start_response)

    if limiter is None:
        limiter = _SteadyRate(DEFAULT_RATE, DEFAULT_BURST)

    return chain(
        routes,
        request_logger(get_logger()),
        recovery,
        rate_limiter(limiter),
    )