"""A repository storing URL records in a MongoDB collection."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any

from pymongo.errors import PyMongoError, WriteError

from .errors import ConflictError, NotFoundError
from .logs import get_logger
from .model import URL, ZERO_TIME
from .repository import URLRepository

DUPLICATE_KEY_CODE = 11000


def _aware(moment: Any) -> datetime | None:
    if not isinstance(moment, datetime):
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _from_document(doc: dict) -> URL:
    object_id = doc.get("_id")
    return URL(
        original_url=doc.get("original_url") or "",
        short_url=doc.get("short_url") or "",
        custom_url=doc.get("custom_url"),
        expiration_date=_aware(doc.get("expiration_date")),
        created_at=_aware(doc.get("created_at")) or ZERO_TIME,
        object_id="" if object_id is None else str(object_id),
    )


class MongoRepository(URLRepository):
    """URL records in a MongoDB collection with a unique index on ``short_url``."""

    def __init__(self, collection: Any) -> None:
        self._collection = collection
        self._counter = 1
        self._lock = threading.Lock()

    def save_url(self, data: URL) -> None:
        """Insert the record; raise ConflictError on a duplicate short URL."""
        document = {
            "short_url": data.short_url,
            "original_url": data.original_url,
            "created_at": data.created_at,
            "expiration_date": data.expiration_date,
            "custom_url": data.custom_url,
        }
        try:
            result = self._collection.insert_one(document)
        except WriteError as exc:
            if exc.code == DUPLICATE_KEY_CODE:
                raise ConflictError("short url already exists") from exc
            raise RuntimeError(f"failed to insert url:{exc}") from exc
        except PyMongoError as exc:
            raise RuntimeError(f"failed to insert url:{exc}") from exc
        get_logger().info("Created! id=%s", result.inserted_id)

    def get_url(self, short_url: str) -> URL:
        """Return the record; raise NotFoundError when there is none."""
        try:
            doc = self._collection.find_one({"short_url": short_url})
        except PyMongoError as exc:
            raise RuntimeError(f"error while retrieving URL: {exc}") from exc
        if doc is None:
            raise NotFoundError("url with short_url '%s' not found", short_url)
        return _from_document(doc)

    def increment_counter(self) -> int:
        """Return a counter past the number of stored documents."""
        with self._lock:
            count = self._collection.count_documents({})
            if self._counter < count:
                self._counter = count + 1
            return self._counter