"""
Error taxonomy for the book catalog.

Three kinds of failure leave the service layer:

- ``InvalidRequestError``: malformed identifier, blank required field,
  unknown status, missing search query.  Caller-correctable (400).
- ``NotFoundError``: the targeted book does not exist (404).
- ``StorageFailureError``: anything unexpected raised by the store.  The
  message is generic; the cause is only written to the server log (500).

Service operations return these inside a ``ServiceResult`` rather than
raising them.  The HTTP layer maps them to envelopes via ``status_code``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class BookServiceError(Exception):
    """Base class for book catalog errors."""

    kind: ErrorKind = ErrorKind.STORAGE_FAILURE
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookServiceError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))


class InvalidRequestError(BookServiceError):
    """Input validation failed."""

    kind = ErrorKind.INVALID_REQUEST
    status_code = 400


class NotFoundError(BookServiceError):
    """Book not found."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class StorageFailureError(BookServiceError):
    """The store raised an unexpected error."""

    kind = ErrorKind.STORAGE_FAILURE
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
