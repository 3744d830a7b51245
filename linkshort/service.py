"""The URL shortening service and URL validation."""

from __future__ import annotations

import re
import string
from datetime import datetime, timezone

from .base62 import encode_base62
from .logs import get_logger
from .model import URL
from .repository import URLRepository

SELF_PREFIX = "http://localhost:8080/"

_SHORT_URL = re.compile(r"[a-zA-Z0-9]{1,10}")
_SCHEME_TAIL = set(string.digits + "+-.")
_HOST_CHARS = set(string.ascii_letters + string.digits + "-._~!$&'()*+,;=:[]<>\"")
_USERINFO_CHARS = set(string.ascii_letters + string.digits + "-._:~!$&'()*+,;=%@")
_HEX = set(string.hexdigits)


class InvalidURLError(ValueError):
    """A long or short URL is not acceptable."""


class ServiceError(Exception):
    """A storage operation failed; ``cause`` holds the underlying error."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


def is_valid_short_url(short_url: str) -> bool:
    """Return True if the short URL is 1 to 10 ASCII letters or digits."""
    return _SHORT_URL.fullmatch(short_url) is not None


def _split_scheme(raw: str) -> tuple[str, str]:
    for pos, char in enumerate(raw):
        if char in string.ascii_letters:
            continue
        if char in _SCHEME_TAIL:
            if pos == 0:
                return "", raw
            continue
        if char == ":":
            if pos == 0:
                raise ValueError("missing protocol scheme")
            return raw[:pos].lower(), raw[pos + 1:]
        return "", raw
    return "", raw


def _valid_port(colon_port: str) -> bool:
    return colon_port == "" or (colon_port.startswith(":") and colon_port[1:].isascii()
                                and all(c in string.digits for c in colon_port[1:]))


def _check_host(host: str) -> None:
    if host.startswith("["):
        end = host.rfind("]")
        if end < 0:
            raise ValueError("missing ']' in host")
        if not _valid_port(host[end + 1:]):
            raise ValueError("invalid port after host")
    else:
        colon = host.rfind(":")
        if colon >= 0 and not _valid_port(host[colon:]):
            raise ValueError("invalid port after host")
    pos = 0
    while pos < len(host):
        char = host[pos]
        if char == "%":
            if len(host) < pos + 3 or not set(host[pos + 1:pos + 3]) <= _HEX:
                raise ValueError("invalid URL escape")
            pos += 3
            continue
        if char.isascii() and char not in _HOST_CHARS:
            raise ValueError("invalid character in host name")
        pos += 1


def _parse_request_uri(raw: str) -> tuple[str, str]:
    """Return the scheme and host of a request URI; raise ValueError if malformed."""
    if not raw:
        raise ValueError("empty url")
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
        raise ValueError("invalid control character in URL")
    scheme, rest = _split_scheme(raw)
    if rest.endswith("?") and rest.count("?") == 1:
        rest = rest[:-1]
    else:
        rest = rest.partition("?")[0]
    if not rest.startswith("/"):
        if scheme:
            return scheme, ""
        raise ValueError("invalid URI for request")
    if not (scheme and rest.startswith("//")):
        return scheme, ""
    authority = rest[2:].partition("/")[0]
    at = authority.rfind("@")
    if at >= 0 and not set(authority[:at]) <= _USERINFO_CHARS:
        raise ValueError("invalid userinfo")
    host = authority[at + 1:]
    _check_host(host)
    return scheme, host


def validate_url(raw_url: str) -> None:
    """Raise InvalidURLError unless ``raw_url`` is an absolute http(s) URL elsewhere."""
    try:
        scheme, host = _parse_request_uri(raw_url)
    except ValueError as exc:
        get_logger().info("validation failed for url: service=%s", exc)
        raise InvalidURLError("invalid URL format") from exc
    if scheme not in ("http", "https"):
        raise InvalidURLError("URL must start with http:// or https://")
    if not host:
        raise InvalidURLError("URL must contain a valid domain")
    if raw_url.startswith(SELF_PREFIX):
        raise InvalidURLError("URL must contain a valid domain")


class ShortenerService:
    """Creates and resolves short URLs on top of a repository."""

    def __init__(self, repo: URLRepository) -> None:
        self._repo = repo

    def save_url(self, data: URL) -> str:
        """Store ``data`` under a new or custom short URL and return that key."""
        try:
            validate_url(data.original_url)
        except InvalidURLError as exc:
            raise InvalidURLError("invalid url") from exc

        counter = self._repo.increment_counter()
        short_url = data.custom_url if data.custom_url else encode_base62(counter)

        get_logger().info(
            "Hashed url with counter: %s %s %s", data.original_url, counter, short_url
        )
        data.short_url = short_url
        data.created_at = datetime.now(timezone.utc)

        try:
            self._repo.save_url(data)
        except Exception as exc:
            raise ServiceError(
                f"shortener/service: failed to create url: {exc}", exc
            ) from exc
        return short_url

    def get_url(self, short_url: str) -> URL:
        """Return the record stored under ``short_url``."""
        if not is_valid_short_url(short_url):
            raise InvalidURLError("invalid url")
        try:
            return self._repo.get_url(short_url)
        except Exception as exc:
            raise ServiceError(f"shortener/service: failed to get url: {exc}", exc) from exc