"""The storage interface for URL records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .model import URL


class URLRepository(ABC):
    """Stores and retrieves URL records and hands out counter values."""

    @abstractmethod
    def save_url(self, data: URL) -> None:
        """Store ``data``; raise ConflictError if its short URL is taken."""

    @abstractmethod
    def get_url(self, short_url: str) -> URL:
        """Return the record for ``short_url``; raise NotFoundError if absent."""

    @abstractmethod
    def increment_counter(self) -> int:
        """Return the next counter value."""