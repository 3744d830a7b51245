"""WSGI middleware: chaining, request logging, panic recovery and rate limiting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.wrappers import Response

from .errors import new_error_response, write_json_error
from .logs import get_logger

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]
Middleware = Callable[[WSGIApp], WSGIApp]

UNLIMITED_PREFIX = "/swagger/"


def chain(app: WSGIApp, *args: Middleware) -> WSGIApp:
    """Wrap ``app`` in each middleware in turn; the last one ends up outermost."""
    for middleware in args:
        app = middleware(app)
    return app


def request_logger(logger: logging.Logger) -> Middleware:
    """Return a middleware that logs method, path and user agent of each request."""

    def wrap(app: WSGIApp) -> WSGIApp:
        def logged(environ: dict, start_response: Any) -> Iterable[bytes]:
            logger.info(
                "Incoming request method=%s path=%s user_agent=%s",
                environ.get("REQUEST_METHOD", ""),
                environ.get("PATH_INFO", "") or "/",
                environ.get("HTTP_USER_AGENT", ""),
            )
            return app(environ, start_response)

        return logged

    return wrap


def recovery(app: WSGIApp) -> WSGIApp:
    """Turn an exception raised by ``app`` into a 500 response."""

    def recovered(environ: dict, start_response: Any) -> Iterable[bytes]:
        started = False

        def tracking_start_response(*args: Any) -> Any:
            nonlocal started
            started = True
            return start_response(*args)

        try:
            return app(environ, tracking_start_response)
        except Exception as exc:
            get_logger().error("Recovered from panic: %s", exc, exc_info=True)
            response = Response(
                "Internal Server Error\n",
                status=500,
                content_type="text/plain; charset=utf-8",
                headers={"X-Content-Type-Options": "nosniff"},
            )
            app_iter, status, headers = response.get_wsgi_response(environ)
            if started:
                start_response(status, headers, (type(exc), exc, exc.__traceback__))
            else:
                start_response(status, headers)
            return app_iter

    return recovered


def rate_limiter(limiter: Any) -> Middleware:
    """Return a middleware answering 429 when ``limiter.allow()`` refuses."""

    def wrap(app: WSGIApp) -> WSGIApp:
        def limited(environ: dict, start_response: Any) -> Iterable[bytes]:
            if environ.get("PATH_INFO", "").startswith(UNLIMITED_PREFIX):
                return app(environ, start_response)
            if not limiter.allow():
                response = write_json_error(
                    429, new_error_response(429, "Too Many Requests", "")
                )
                return response(environ, start_response)
            return app(environ, start_response)

        return limited

    return wrap