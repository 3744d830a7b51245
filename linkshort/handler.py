"""HTTP handlers for creating, resolving and previewing short URLs."""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, Rule
from werkzeug.utils import redirect, send_file
from werkzeug.wrappers import Request, Response

from .errors import (
    ConflictError,
    ErrorDetail,
    ErrorResponse,
    NotFoundError,
    new_error_response,
    write_json_error,
)
from .model import URL, validate
from .service import is_valid_short_url

DEFAULT_TEMPLATE = "web/templates/index.html"
DEFAULT_FAVICON = "web/assets/favicon.ico"
SHORT_URL_BASE = "http://localhost:8080/"

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _text_error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _json_response(payload: Any, status: int) -> Response:
    return Response(json.dumps(payload) + "\n", status=status, content_type="application/json")


def _http_date(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return (
        f"{_DAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment.year:04d} {moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} GMT"
    )


def _caused_by(exc: BaseException, kind: type[BaseException]) -> bool:
    """Return True if ``exc`` or anything it wraps is an instance of ``kind``."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, kind):
            return True
        seen.add(id(current))
        current = getattr(current, "cause", None) or current.__cause__
    return False


def _decode_body(raw: str) -> URL:
    text = raw.lstrip(" \t\r\n")
    if not text:
        raise ValueError("EOF")
    value, _ = json.JSONDecoder().raw_decode(text)
    if value is None:
        return URL()
    return URL.from_dict(value)


def _invalid_short_url() -> Response:
    return write_json_error(
        400,
        ErrorResponse(
            errors=[
                ErrorDetail(
                    status=400,
                    title="URL is not valid",
                    detail="URL should be formatted correctly",
                )
            ]
        ),
    )


class Handler:
    """A WSGI application serving the shortener's routes."""

    def __init__(
        self,
        service: Any,
        *,
        template_path: str | Path = DEFAULT_TEMPLATE,
        favicon_path: str | Path = DEFAULT_FAVICON,
    ) -> None:
        self._service = service
        self._template_path = Path(template_path)
        self._favicon_path = Path(favicon_path)
        self._map = Map(
            [
                Rule("/favicon.ico", methods=["GET"], endpoint="favicon"),
                Rule("/shorten", methods=["POST"], endpoint="shorten"),
                Rule("/preview/<shorturl>", methods=["GET"], endpoint="preview"),
                Rule("/<shorturl>", methods=["GET"], endpoint="redirect"),
            ]
        )

    def home(self, request: Request) -> Response:
        """Serve the index page; other unmatched paths get an empty response."""
        if request.path != "/":
            return Response(b"", status=200)
        try:
            page = self._template_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return _text_error("Error loading page", 500)
        return Response(page, status=200, content_type="text/html; charset=utf-8")

    def favicon(self, request: Request) -> Response:
        """Serve the site icon."""
        if not self._favicon_path.is_file():
            return _text_error("404 page not found", 404)
        return send_file(self._favicon_path.resolve(), request.environ)

    def shorten_url(self, request: Request) -> Response:
        """Create a short URL from the JSON request body."""
        if request.method != "POST":
            return _text_error("Invalid request method", 405)

        try:
            request_data = _decode_body(request.get_data(as_text=True))
        except ValueError as exc:
            return write_json_error(400, new_error_response(400, "JSON error", str(exc)))

        failures = validate(request_data)
        if failures:
            return write_json_error(
                400,
                ErrorResponse(
                    errors=[
                        ErrorDetail(
                            status=400,
                            title=f"invalid field: {failure.field}",
                            detail=f"validation failed on '{failure.tag}' tag",
                        )
                        for failure in failures
                    ]
                ),
            )

        data = URL(
            original_url=request_data.original_url,
            custom_url=request_data.custom_url,
            expiration_date=request_data.expiration_date,
        )
        try:
            short_key = self._service.save_url(data)
        except Exception as exc:
            if _caused_by(exc, ConflictError):
                return write_json_error(409, new_error_response(409, "conflict", str(exc)))
            return _text_error(str(exc), 500)

        data.short_url = SHORT_URL_BASE + short_key
        return _json_response(data.to_dict(), 201)

    def _lookup(self, shorturl: str) -> URL | Response:
        if not shorturl or not is_valid_short_url(shorturl):
            return _invalid_short_url()
        try:
            return self._service.get_url(shorturl)
        except Exception as exc:
            if _caused_by(exc, NotFoundError):
                return write_json_error(404, new_error_response(404, "url not found", str(exc)))
            return _text_error(str(exc), 500)

    def redirect_url(self, request: Request, shorturl: str) -> Response:
        """Redirect to the original URL stored under ``shorturl``."""
        found = self._lookup(shorturl)
        if isinstance(found, Response):
            return found
        response = redirect(found.original_url, code=302)
        response.headers["Cache-Control"] = "no-store"
        return response

    def preview_url(self, request: Request, shorturl: str) -> Response:
        """Return the stored record for ``shorturl`` as JSON."""
        found = self._lookup(shorturl)
        if isinstance(found, Response):
            return found
        response = _json_response(found.to_dict(), 200)
        response.headers["Last-Modified"] = _http_date(found.created_at)
        response.headers["Cache-Control"] = "public, max-age=3600"
        return response

    def dispatch(self, request: Request) -> Response:
        """Route the request to its handler; anything unmatched goes to ``home``."""
        adapter = self._map.bind_to_environ(request.environ)
        try:
            endpoint, args = adapter.match()
        except HTTPException:
            return self.home(request)
        if endpoint == "favicon":
            return self.favicon(request)
        if endpoint == "shorten":
            return self.shorten_url(request)
        if endpoint == "preview":
            return self.preview_url(request, args["shorturl"])
        return self.redirect_url(request, args["shorturl"])

    def __call__(self, environ: dict, start_response: Any) -> Iterable[bytes]:
        response = self.dispatch(Request(environ))
        return response(environ, start_response)