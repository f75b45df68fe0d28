from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# PUBLIC_INTERFACE
class ErrorKind(str, Enum):
    """Categories of failure surfaced at the API boundary."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    UNKNOWN = "unknown"


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
    ErrorKind.UNKNOWN: 500,
}


# PUBLIC_INTERFACE
class TodoError(Exception):
    """
    Base error raised by the service layer.

    Every instance carries an ErrorKind; the HTTP layer picks the response
    status from it and never looks at the message text.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, detail: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "message": self.message, "detail": self.detail}


class TodoValidationError(TodoError):
    kind = ErrorKind.VALIDATION


class TodoNotFoundError(TodoError):
    kind = ErrorKind.NOT_FOUND


class StorageUnavailableError(TodoError):
    kind = ErrorKind.STORAGE_UNAVAILABLE


class StorageOperationError(TodoError):
    kind = ErrorKind.UNKNOWN
