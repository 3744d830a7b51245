from datetime import datetime, timedelta, timezone

import pytest

from linkshort.model import URL, FieldError, validate


def test_default_to_dict_omits_empty_ids():
    data = URL(original_url="https://example.com", short_url="abc").to_dict()
    assert "id" not in data
    assert "objectID" not in data
    assert data["customURL"] is None
    assert data["expirationDate"] is None
    assert data["createdAt"] == "0001-01-01T00:00:00Z"


def test_round_trip():
    url = URL(
        original_url="https://example.com",
        short_url="1C",
        custom_url="custom123",
        expiration_date=datetime(2030, 5, 6, 7, 8, 9, 120000, tzinfo=timezone.utc),
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2))),
        id=7,
        object_id="obj",
    )
    assert URL.from_dict(url.to_dict()) == url


def test_from_dict_parses_times():
    url = URL.from_dict({"originalURL": "https://example.com", "createdAt": "2024-01-02T03:04:05Z"})
    assert url.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert url.to_dict()["createdAt"] == "2024-01-02T03:04:05Z"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"originalURL": 5},
        {"id": "one"},
        {"customURL": 12},
        {"createdAt": "yesterday"},
    ],
)
def test_from_dict_rejects_bad_types(payload):
    with pytest.raises(ValueError):
        URL.from_dict(payload)


def test_validate_accepts_good_record():
    assert validate(URL(original_url="https://example.com", custom_url="abc123")) == []


@pytest.mark.parametrize(
    "url, expected",
    [
        (URL(), [FieldError("OriginalURL", "required")]),
        (URL(original_url="invalid-url"), [FieldError("OriginalURL", "url")]),
        (URL(original_url="https://example.com", custom_url="a-b"), [FieldError("CustomURL", "alphanum")]),
        (URL(original_url="https://example.com", custom_url="ab"), [FieldError("CustomURL", "min")]),
        (URL(original_url="https://example.com", custom_url="a" * 21), [FieldError("CustomURL", "max")]),
    ],
)
def test_validate_failures(url, expected):
    assert validate(url) == expected


def test_validate_reports_each_field():
    errors = validate(URL(custom_url="!"))
    assert [e.field for e in errors] == ["OriginalURL", "CustomURL"]