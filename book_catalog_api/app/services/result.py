"""Explicit success/failure container returned by service operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from book_catalog_api.app.core.errors import BookServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Either a value or a ``BookServiceError``, never both.

    Operations that produce nothing on success (delete) carry ``None``
    as the value; check ``ok`` rather than testing the value.
    """

    value: Optional[T] = None
    error: Optional[BookServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BookServiceError) -> "ServiceResult[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
