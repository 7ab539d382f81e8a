"""
Error taxonomy and the single boundary that renders errors as HTTP responses.

Feature code raises `AppError` with a kind tag; `error_response()` is the only
place that turns a kind into a status code. Every error body has the shape
`{"error": "<message>"}`.
"""

from __future__ import annotations

import enum

from fastapi import status
from fastapi.responses import JSONResponse


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


# Conflicts are state-precondition failures; clients see them as bad requests.
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR_MESSAGE = "Internal server error."


class AppError(Exception):
    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


def validation_error(message: str) -> AppError:
    return AppError(ErrorKind.VALIDATION, message)


def unauthorized(message: str) -> AppError:
    return AppError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str) -> AppError:
    return AppError(ErrorKind.FORBIDDEN, message)


def not_found(message: str) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> AppError:
    return AppError(ErrorKind.CONFLICT, message)


def kind_for_status(status_code: int) -> ErrorKind:
    """
    Best-effort reverse lookup for framework errors that only carry a status.
    """
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return ErrorKind.UNAUTHORIZED
    if status_code == status.HTTP_403_FORBIDDEN:
        return ErrorKind.FORBIDDEN
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorKind.NOT_FOUND
    if status_code >= 500:
        return ErrorKind.INTERNAL
    return ErrorKind.VALIDATION


def error_response(kind: ErrorKind, message: str, *, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code if status_code is not None else STATUS_BY_KIND[kind],
        content={"error": message},
    )


def first_validation_message(errors: list[dict]) -> str:
    """
    Build a message from the first failing field of a pydantic error list.
    """
    if not errors:
        return "Invalid request body."

    first = errors[0]
    # FastAPI prefixes the location with "body"/"path"/"query".
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    msg = str(first.get("msg") or "Invalid value.")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, ") :]
    if not loc:
        return msg
    return f"{'.'.join(loc)}: {msg}"
