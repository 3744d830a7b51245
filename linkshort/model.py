"""The URL record and its request validation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import urlsplit

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)
_ALPHANUM = re.compile(r"^[a-zA-Z0-9]+$")


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if not offset:
        return text + "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_time(text: object) -> datetime:
    if not isinstance(text, str):
        raise ValueError("time must be an RFC 3339 string")
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"cannot parse {text!r} as RFC 3339 time")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "").ljust(6, "0")[:6] or 0)
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )


@dataclass
class URL:
    """A shortened URL record."""

    original_url: str = ""
    short_url: str = ""
    custom_url: str | None = None
    expiration_date: datetime | None = None
    created_at: datetime = ZERO_TIME
    id: int = 0
    object_id: str = ""

    def to_dict(self) -> dict:
        """Return the JSON form with camel-case keys."""
        out: dict = {}
        if self.id:
            out["id"] = self.id
        if self.object_id:
            out["objectID"] = self.object_id
        out["originalURL"] = self.original_url
        out["shortURL"] = self.short_url
        out["customURL"] = self.custom_url
        out["expirationDate"] = (
            None if self.expiration_date is None else _format_time(self.expiration_date)
        )
        out["createdAt"] = _format_time(self.created_at)
        return out

    @classmethod
    def from_dict(cls, data: object) -> URL:
        """Build a record from its JSON form; raise ValueError on bad types."""
        if not isinstance(data, Mapping):
            raise ValueError("expected a JSON object")

        def text(key: str) -> str:
            value = data.get(key)
            if value is None:
                return ""
            if not isinstance(value, str):
                raise ValueError(f"field {key!r} must be a string")
            return value

        identifier = data.get("id")
        if identifier is None:
            identifier = 0
        elif isinstance(identifier, bool) or not isinstance(identifier, int):
            raise ValueError("field 'id' must be an integer")

        custom = data.get("customURL")
        if custom is not None and not isinstance(custom, str):
            raise ValueError("field 'customURL' must be a string")

        expiration = data.get("expirationDate")
        created = data.get("createdAt")
        return cls(
            original_url=text("originalURL"),
            short_url=text("shortURL"),
            custom_url=custom,
            expiration_date=None if expiration is None else _parse_time(expiration),
            created_at=ZERO_TIME if created is None else _parse_time(created),
            id=identifier,
            object_id=text("objectID"),
        )


@dataclass(frozen=True)
class FieldError:
    """A failed validation rule on one field."""

    field: str
    tag: str


def _is_url(value: str) -> bool:
    lowered = value.lower()
    if lowered.startswith("file:/"):
        return True
    try:
        parts = urlsplit(lowered)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    opaque = bool(parts.path) and not parts.path.startswith("/") and not parts.netloc
    return bool(parts.netloc or parts.fragment or opaque)


def validate(url: URL) -> list[FieldError]:
    """Check a request record and return the failed rules, one per field."""
    errors: list[FieldError] = []
    if not url.original_url:
        errors.append(FieldError("OriginalURL", "required"))
    elif not _is_url(url.original_url):
        errors.append(FieldError("OriginalURL", "url"))

    custom = url.custom_url
    if custom is not None:
        if not _ALPHANUM.match(custom):
            errors.append(FieldError("CustomURL", "alphanum"))
        elif len(custom) < 3:
            errors.append(FieldError("CustomURL", "min"))
        elif len(custom) > 20:
            errors.append(FieldError("CustomURL", "max"))
    return errors