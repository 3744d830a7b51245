"""A JSON cache on top of a Redis client."""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any

GET_REFRESH_TTL = timedelta(hours=2)


class CacheMiss(LookupError):
    """The key is not present in the cache."""

    def __init__(self, key: str) -> None:
        super().__init__("redis: nil")
        self.key = key


def _to_json(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"unsupported type: {type(value).__name__}")


def _expiry(ttl: timedelta | float | int) -> dict:
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    millis = round(seconds * 1000)
    if millis <= 0:
        return {}
    if millis % 1000 == 0:
        return {"ex": millis // 1000}
    return {"px": millis}


class RedisCache:
    """Stores JSON values in Redis with a time to live."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def set(self, key: str, value: Any, ttl: timedelta | float | int) -> None:
        """Serialise ``value`` to JSON and store it under ``key``."""
        payload = json.dumps(value, default=_to_json, separators=(",", ":"))
        self._client.set(key, payload, **_expiry(ttl))

    def get(self, key: str) -> Any:
        """Return the decoded value, refreshing its TTL; raise CacheMiss if absent."""
        raw = self._client.getex(key, ex=int(GET_REFRESH_TTL.total_seconds()))
        if raw is None:
            raise CacheMiss(key)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        if raw == "":
            return None
        return json.loads(raw)

    def increment(self, key: str) -> int:
        """Atomically increment the counter under ``key`` and return it."""
        return int(self._client.incr(key))