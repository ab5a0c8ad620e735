"""
Book record and lifecycle status.

``Book`` is a plain dataclass: it knows nothing about the database.
``id`` and the timestamps are ``None`` until the store assigns them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

# Ids live in a signed 64-bit SQLite INTEGER column; copyright years are
# 32-bit signed integers on the wire.
MIN_BOOK_ID = -(2**63)
MAX_BOOK_ID = 2**63 - 1
MIN_COPYRIGHT_YEAR = -(2**31)
MAX_COPYRIGHT_YEAR = 2**31 - 1


class BookStatus(str, Enum):
    """Lifecycle classification of a book.

    There is no transition graph: an update may move a book from any
    status to any other.
    """

    PENDING = "PENDING"
    REJECTED = "REJECTED"
    APPROVED = "APPROVED"

    @classmethod
    def parse(cls, value: str) -> "BookStatus":
        """Parse a status name case-insensitively.

        Raises ``ValueError`` for anything outside the closed set.
        """
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Invalid status: {value}") from None

    @classmethod
    def names(cls) -> list[str]:
        return [member.name for member in cls]


@dataclass
class Book:
    isbn: str
    title: str
    copyright_year: int
    status: BookStatus
    subtitle: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
