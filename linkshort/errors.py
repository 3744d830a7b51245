"""Application error types and JSON error responses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from werkzeug.wrappers import Response


@dataclass
class ErrorDetail:
    """One error entry returned to the client."""

    status: int
    title: str
    detail: str
    code: str = ""

    def to_dict(self) -> dict:
        """Return the JSON-ready form; ``code`` is left out when empty."""
        out = {"status": self.status, "title": self.title, "detail": self.detail}
        if self.code:
            out["code"] = self.code
        return out


@dataclass
class ErrorResponse:
    """The error body returned to the client."""

    errors: list[ErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return the JSON-ready form."""
        return {"errors": [error.to_dict() for error in self.errors]}


def new_error_response(status: int, title: str, detail: str) -> ErrorResponse:
    """Build a response holding a single error."""
    return ErrorResponse(errors=[ErrorDetail(status=status, title=title, detail=detail)])


def write_json_error(status_code: int, errors: ErrorResponse) -> Response:
    """Return an HTTP response carrying ``errors`` as JSON."""
    body = json.dumps(errors.to_dict()) + "\n"
    return Response(body, status=status_code, content_type="application/json")


class AppError(Exception):
    """Base class of the application's typed errors.

    The message is formatted printf-style when arguments are given.
    Two errors are equal when they have the same type and message.
    """

    def __init__(self, message: str = "", *args: object) -> None:
        self.message = message % args if args else message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))


class NotFoundError(AppError):
    """A requested document was not found."""


class BadRequestError(AppError):
    """The request was malformed."""


class ForbiddenError(AppError):
    """Access to the resource is forbidden."""


class ConflictError(AppError):
    """The resource conflicts with an existing one."""