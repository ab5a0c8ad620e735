"""
Business logic for books.

``BookService`` validates untrusted requests, runs each operation inside
exactly one store transaction and maps the stored ``Book`` to the
``BookRead`` transfer object.  Operations never raise for expected
outcomes: they return a ``ServiceResult`` holding either the payload or
one of ``InvalidRequestError``, ``NotFoundError`` or
``StorageFailureError``.

Anything the store raises is logged with its traceback and reported as
a ``StorageFailureError`` carrying a generic "Failed to ..." message.
Nothing is retried.

Updates are merge-patch: only fields present on the request are
written.  Status changes are not checked against a transition table.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional, Union

from book_catalog_api.app.core.errors import (
    InvalidRequestError,
    NotFoundError,
    StorageFailureError,
)
from book_catalog_api.app.models.book import MAX_BOOK_ID, MIN_BOOK_ID, Book, BookStatus
from book_catalog_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from book_catalog_api.app.services.result import ServiceResult
from book_catalog_api.app.stores.book_store import BookStore

logger = logging.getLogger(__name__)

BookId = Union[str, int]

_BOOK_ID_RE = re.compile(r"[+-]?[0-9]+")


def parse_book_id(raw_id: Optional[BookId]) -> Optional[int]:
    """Return ``raw_id`` as an integer, or ``None`` if it is not one.

    Only optionally signed ASCII decimal digits are accepted, and the value
    must fit the 64-bit id column.
    """
    if raw_id is None or isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        parsed = raw_id
    else:
        text = str(raw_id).strip()
        if not _BOOK_ID_RE.fullmatch(text):
            return None
        parsed = int(text)
    if not MIN_BOOK_ID <= parsed <= MAX_BOOK_ID:
        return None
    return parsed


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class BookService:
    """Service for managing book records.

    The store is injected so the service can run against SQLite in
    production and against a fake or mock in tests.
    """

    def __init__(self, store: BookStore) -> None:
        self.store = store

    async def create(self, request: BookCreate) -> ServiceResult[BookRead]:
        """Validate ``request`` and persist it as a new book.

        ``subtitle`` defaults to an empty string and ``status`` is
        normalised to its upper-case name.
        """
        logger.info("Creating new book with title: %s", request.title)
        if _is_blank(request.isbn):
            return ServiceResult.failure(InvalidRequestError("ISBN is required"))
        if _is_blank(request.title):
            return ServiceResult.failure(InvalidRequestError("Title is required"))
        if request.copyright_year is None:
            return ServiceResult.failure(InvalidRequestError("Copyright year is required"))
        status = self._parse_status(request.status)
        if isinstance(status, InvalidRequestError):
            return ServiceResult.failure(status)

        book = Book(
            isbn=request.isbn,
            title=request.title,
            subtitle=request.subtitle if request.subtitle is not None else "",
            copyright_year=request.copyright_year,
            status=status,
        )
        try:
            with self.store.transaction() as session:
                created = session.create(book)
        except Exception as exc:
            return self._storage_failure("create book", exc)

        logger.info("Successfully created book with id: %s", created.id)
        return ServiceResult.success(BookRead.from_book(created))

    async def get_one(self, book_id: Optional[BookId]) -> ServiceResult[BookRead]:
        """Fetch a single book by its identifier."""
        logger.info("Fetching book with id: %s", book_id)
        parsed_id = parse_book_id(book_id)
        if parsed_id is None:
            return ServiceResult.failure(InvalidRequestError(f"Invalid book ID format: {book_id}"))
        try:
            with self.store.transaction() as session:
                book = session.find_by_id(parsed_id)
        except Exception as exc:
            return self._storage_failure("get book", exc)

        if book is None:
            return ServiceResult.failure(NotFoundError(f"Book not found with id: {parsed_id}"))
        return ServiceResult.success(BookRead.from_book(book))

    async def get_all(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> ServiceResult[List[BookRead]]:
        """Return every book ordered by id.

        ``limit`` and ``offset`` give simple pagination; by default all
        records are returned.  An empty catalog yields an empty list.
        """
        logger.info("Fetching all books (limit=%s, offset=%s)", limit, offset)
        if limit is not None and limit < 1:
            return ServiceResult.failure(InvalidRequestError("Limit must be at least 1"))
        if offset < 0:
            return ServiceResult.failure(InvalidRequestError("Offset must not be negative"))
        try:
            with self.store.transaction() as session:
                books = session.find_all(limit=limit, offset=offset)
        except Exception as exc:
            return self._storage_failure("get books", exc)
        return ServiceResult.success([BookRead.from_book(book) for book in books])

    async def update(
        self,
        request: BookUpdate,
        book_id: Optional[BookId] = None,
    ) -> ServiceResult[BookRead]:
        """Apply the fields present on ``request`` to an existing book.

        The target is ``book_id`` when given (e.g. taken from the URL),
        otherwise ``request.id``.  Present ``isbn`` and ``title`` must be
        non-blank and a present ``status`` must parse; absent fields keep
        their stored values.
        """
        raw_id = book_id if book_id is not None else request.id
        logger.info("Updating book with id: %s", raw_id)
        if raw_id is None:
            return ServiceResult.failure(InvalidRequestError("Book ID is required"))
        parsed_id = parse_book_id(raw_id)
        if parsed_id is None:
            return ServiceResult.failure(InvalidRequestError(f"Invalid book ID format: {raw_id}"))

        if request.isbn is not None and _is_blank(request.isbn):
            return ServiceResult.failure(InvalidRequestError("ISBN must not be blank"))
        if request.title is not None and _is_blank(request.title):
            return ServiceResult.failure(InvalidRequestError("Title must not be blank"))
        status = None
        if request.status is not None:
            status = self._parse_status(request.status)
            if isinstance(status, InvalidRequestError):
                return ServiceResult.failure(status)

        try:
            with self.store.transaction() as session:
                existing = session.find_by_id(parsed_id)
                if existing is None:
                    return ServiceResult.failure(NotFoundError(f"Book not found with id: {parsed_id}"))
                changes = {
                    "isbn": request.isbn,
                    "title": request.title,
                    "subtitle": request.subtitle,
                    "copyright_year": request.copyright_year,
                    "status": status,
                }
                updated = session.update(
                    replace(existing, **{k: v for k, v in changes.items() if v is not None})
                )
        except Exception as exc:
            return self._storage_failure("update book", exc)

        logger.info("Successfully updated book with id: %s", updated.id)
        return ServiceResult.success(BookRead.from_book(updated))

    async def delete(self, book_id: Optional[BookId]) -> ServiceResult[None]:
        """Permanently remove a book."""
        logger.info("Deleting book with id: %s", book_id)
        parsed_id = parse_book_id(book_id)
        if parsed_id is None:
            return ServiceResult.failure(InvalidRequestError(f"Invalid book ID format: {book_id}"))
        try:
            with self.store.transaction() as session:
                book = session.find_by_id(parsed_id)
                if book is None:
                    return ServiceResult.failure(NotFoundError(f"Book not found with id: {parsed_id}"))
                session.delete(book)
        except Exception as exc:
            return self._storage_failure("delete book", exc)

        logger.info("Successfully deleted book with id: %s", parsed_id)
        return ServiceResult.success(None)

    async def search(self, query: Optional[str]) -> ServiceResult[List[BookRead]]:
        """Case-insensitive substring search over title and subtitle.

        Results come back in store order; no match is an empty list.
        """
        logger.info("Searching books with query: %s", query)
        if _is_blank(query):
            return ServiceResult.failure(InvalidRequestError("Query parameter is required"))
        try:
            with self.store.transaction() as session:
                books = session.search_by_title_or_subtitle(query.strip())
        except Exception as exc:
            return self._storage_failure("search books", exc)
        return ServiceResult.success([BookRead.from_book(book) for book in books])

    @staticmethod
    def _parse_status(value: Optional[str]) -> Union[BookStatus, InvalidRequestError]:
        if _is_blank(value):
            return InvalidRequestError("Status is required")
        try:
            return BookStatus.parse(value)
        except ValueError:
            return InvalidRequestError(
                f"Invalid status: {value}. Must be one of {', '.join(BookStatus.names())}"
            )

    @staticmethod
    def _storage_failure(operation: str, exc: Exception) -> ServiceResult:
        logger.exception("Failed to %s", operation)
        return ServiceResult.failure(StorageFailureError(f"Failed to {operation}", cause=exc))
