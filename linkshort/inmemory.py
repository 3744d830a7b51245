"""A repository that keeps URL records in process memory."""

from __future__ import annotations

import dataclasses
import threading

from .errors import ConflictError, NotFoundError
from .logs import get_logger
from .model import URL
from .repository import URLRepository


class InMemoryRepository(URLRepository):
    """Thread-safe in-memory store keyed by short URL."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, URL] = {}
        self._counter = 1

    def save_url(self, data: URL) -> None:
        """Store a copy of ``data`` and set its ``id``."""
        with self._lock:
            lookup = data.custom_url if data.custom_url is not None else data.short_url
            if lookup in self._store:
                get_logger().info("short url already exists: url=%s", lookup)
                raise ConflictError("short url already exists")
            data.id = len(self._store) + 1
            self._store[data.short_url] = dataclasses.replace(data)

    def get_url(self, short_url: str) -> URL:
        """Return a copy of the stored record."""
        with self._lock:
            try:
                return dataclasses.replace(self._store[short_url])
            except KeyError:
                raise NotFoundError("failed to get original url") from None

    def increment_counter(self) -> int:
        """Return the current counter value and advance it."""
        with self._lock:
            if self._counter < len(self._store):
                self._counter = len(self._store) + 1
            counter = self._counter
            self._counter += 1
            return counter