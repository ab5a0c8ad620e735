"""
Pydantic models for book data.

``BookCreate`` and ``BookUpdate`` describe untrusted input.  Every field
is optional at the schema level: required-field checks live in
``BookService`` so that the same rules (and messages) apply whether the
service is called over HTTP or directly.  ``BookRead`` is the transfer
object returned to callers.

JSON uses camelCase for multi-word fields (``copyrightYear``,
``createdAt``, ``updatedAt``); the snake_case names are accepted on
input as well.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from book_catalog_api.app.models.book import (
    MAX_BOOK_ID,
    MAX_COPYRIGHT_YEAR,
    MIN_BOOK_ID,
    MIN_COPYRIGHT_YEAR,
    Book,
)


class BookCreate(BaseModel):
    """Schema for creating a book."""

    isbn: Optional[str] = Field(None, examples=["9780300267662"])
    title: Optional[str] = Field(None, examples=["Why Architecture Matters"])
    subtitle: Optional[str] = Field(None, examples=["A classic work on the joy of experiencing architecture"])
    copyright_year: Optional[int] = Field(
        None,
        alias="copyrightYear",
        ge=MIN_COPYRIGHT_YEAR,
        le=MAX_COPYRIGHT_YEAR,
        examples=[2023],
    )
    status: Optional[str] = Field(None, examples=["APPROVED"])

    model_config = {
        "populate_by_name": True,
    }


class BookUpdate(BookCreate):
    """Schema for updating a book.

    Only fields provided (non-null) are written; ``id`` selects the
    record and may instead come from the URL path.
    """

    id: Optional[int] = Field(None, ge=MIN_BOOK_ID, le=MAX_BOOK_ID, examples=[1])


class BookRead(BaseModel):
    """Schema for reading a book from the API."""

    id: int
    isbn: str
    title: str
    subtitle: str
    copyright_year: int = Field(..., alias="copyrightYear")
    status: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = {
        "populate_by_name": True,
    }

    @classmethod
    def from_book(cls, book: Book) -> "BookRead":
        return cls(
            id=book.id,
            isbn=book.isbn,
            title=book.title,
            subtitle=book.subtitle,
            copyright_year=book.copyright_year,
            status=book.status.name,
            created_at=book.created_at,
            updated_at=book.updated_at,
        )
