import json

import pytest

from linkshort.errors import (
    AppError,
    BadRequestError,
    ConflictError,
    ErrorDetail,
    ErrorResponse,
    ForbiddenError,
    NotFoundError,
    new_error_response,
    write_json_error,
)


@pytest.mark.parametrize(
    "response, status, title",
    [
        (
            new_error_response(404, "Resource Not Found", "The requested resource could not be found."),
            404,
            "Resource Not Found",
        ),
        (
            new_error_response(400, "Invalid Input", "Some fields are missing."),
            400,
            "Invalid Input",
        ),
    ],
)
def test_write_json_error(response, status, title):
    resp = write_json_error(status, response)
    assert resp.status_code == status
    assert resp.headers["Content-Type"] == "application/json"
    parsed = json.loads(resp.get_data(as_text=True))
    assert len(parsed["errors"]) == 1
    assert parsed["errors"][0]["status"] == status
    assert parsed["errors"][0]["title"] == title


def test_error_detail_omits_empty_code():
    detail = ErrorDetail(status=400, title="t", detail="d")
    assert "code" not in detail.to_dict()
    assert ErrorDetail(400, "t", "d", code="E1").to_dict()["code"] == "E1"


def test_error_response_to_dict():
    response = ErrorResponse(errors=[ErrorDetail(409, "conflict", "exists")])
    assert response.to_dict() == {
        "errors": [{"status": 409, "title": "conflict", "detail": "exists"}]
    }


@pytest.mark.parametrize(
    "error, target",
    [
        (NotFoundError("not found"), NotFoundError),
        (BadRequestError("bad request"), BadRequestError),
        (ForbiddenError("forbidden"), ForbiddenError),
        (ConflictError("conflict"), ConflictError),
    ],
)
def test_error_types_match(error, target):
    with pytest.raises(target) as info:
        raise error
    assert str(info.value) == error.message


def test_no_match_with_other_type():
    error = BadRequestError("bad request")
    assert isinstance(error, BadRequestError)
    assert not isinstance(error, NotFoundError)
    assert not isinstance(error, ConflictError)
    assert str(error) == "bad request"


def test_message_formatting():
    error = NotFoundError("url with short_url '%s' not found", "nonexistent")
    assert str(error) == "url with short_url 'nonexistent' not found"
    assert error == NotFoundError("url with short_url 'nonexistent' not found")


def test_equality_depends_on_type():
    assert ConflictError("short url already exists") == ConflictError("short url already exists")
    assert ConflictError("x") != BadRequestError("x")
    assert len({ConflictError("a"), ConflictError("a")}) == 1
    assert isinstance(ConflictError("a"), AppError) and ConflictError("a").message == "a"