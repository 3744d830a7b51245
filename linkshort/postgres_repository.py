"""A repository storing URL records in PostgreSQL through a DB-API connection."""

from __future__ import annotations

from contextlib import closing
from typing import Any

from .errors import ConflictError
from .logs import get_logger
from .model import URL
from .repository import URLRepository

UNIQUE_VIOLATION = "23505"

INSERT_URL = (
    "INSERT INTO urls\n"
    "(original_url, short_url, custom_url, expiration_date, created_at)\n"
    "VALUES\n"
    "(%s, %s, %s, %s, %s)\n"
    "RETURNING id"
)
SELECT_URL = (
    "SELECT id, original_url, short_url, custom_url, expiration_date, created_at "
    "FROM urls WHERE short_url = %s"
)
NEXT_COUNTER = "SELECT nextval('url_shortener_seq');"


def _sqlstate(exc: BaseException) -> str | None:
    return getattr(exc, "pgcode", None) or getattr(exc, "sqlstate", None)


class PostgresRepository(URLRepository):
    """URL records in the ``urls`` table, counters from ``url_shortener_seq``."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def _fetch_one(self, query: str, params: tuple = ()) -> Any:
        try:
            with closing(self._connection.cursor()) as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        except Exception:
            self._connection.rollback()
            raise
        self._connection.commit()
        return row

    def save_url(self, data: URL) -> None:
        """Insert the record and set ``data.id`` from the new row."""
        params = (
            data.original_url,
            data.short_url,
            data.custom_url,
            data.expiration_date,
            data.created_at,
        )
        try:
            row = self._fetch_one(INSERT_URL, params)
        except Exception as exc:
            if _sqlstate(exc) == UNIQUE_VIOLATION:
                raise ConflictError("short url already exists: try again!") from exc
            raise RuntimeError(f"failed to insert url:{exc}") from exc
        data.id = row[0]

    def get_url(self, short_url: str) -> URL:
        """Return the record stored under ``short_url``."""
        try:
            row = self._fetch_one(SELECT_URL, (short_url,))
        except Exception as exc:
            raise RuntimeError("failed to find short URL") from exc
        if row is None:
            raise RuntimeError("short URL not found")
        identifier, original, short, custom, expiration, created = row
        return URL(
            id=identifier,
            original_url=original,
            short_url=short,
            custom_url=custom,
            expiration_date=expiration,
            created_at=created,
        )

    def increment_counter(self) -> int:
        """Return the next value of the counter sequence."""
        try:
            row = self._fetch_one(NEXT_COUNTER)
            return int(row[0])
        except Exception as exc:
            get_logger().error("failed to get next counter: repo=%s", exc)
            raise RuntimeError("failed to retrieve counter") from exc