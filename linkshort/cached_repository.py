"""A repository wrapper that keeps URL records in a cache."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from .logs import get_logger
from .model import URL
from .repository import URLRepository

CACHE_TTL = timedelta(hours=1)
COUNTER_KEY = "url_shortener_counter"
_UINT64_MASK = (1 << 64) - 1


def _cache_key(short_url: str) -> str:
    return "shorturl:" + short_url


def _as_url(value: Any) -> URL | None:
    if isinstance(value, URL):
        return value
    if isinstance(value, Mapping):
        try:
            return URL.from_dict(value)
        except ValueError:
            return None
    return None


class CachedRepository(URLRepository):
    """Reads through and writes through a cache in front of another repository.

    Cache failures are logged and never fail the operation.
    """

    def __init__(self, repo: URLRepository, cache: Any) -> None:
        self._repo = repo
        self._cache = cache

    def _store(self, data: URL) -> None:
        key = _cache_key(data.short_url)
        try:
            self._cache.set(key, data, CACHE_TTL)
        except Exception as exc:  # the cache is best effort
            get_logger().error("failed to set key: cache=%s error=%s", key, exc)

    def save_url(self, data: URL) -> None:
        """Save to the repository, then cache the record."""
        self._repo.save_url(data)
        self._store(data)

    def get_url(self, short_url: str) -> URL:
        """Return the cached record, or load it from the repository and cache it."""
        try:
            cached = self._cache.get(_cache_key(short_url))
        except Exception:  # any cache failure counts as a miss
            cached = None
        url = _as_url(cached)
        if url is not None:
            return url

        data = self._repo.get_url(short_url)
        self._store(data)
        return data

    def increment_counter(self) -> int:
        """Increment the counter in the cache, falling back to the repository."""
        try:
            value = self._cache.increment(COUNTER_KEY)
        except Exception as exc:
            get_logger().error("%s", exc)
        else:
            return int(value) & _UINT64_MASK
        return self._repo.increment_counter()