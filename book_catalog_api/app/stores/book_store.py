"""
Transactional book storage backed by SQLite.

``BookStore`` and ``BookSession`` describe what the service layer needs;
``SQLiteBookStore`` implements them on top of ``core.db``.  Each
``transaction()`` opens its own connection, commits when the block
exits normally, rolls back when it raises, and always closes the
connection.  Errors from SQLite propagate unchanged.

The store owns ``id``, ``created_at`` and ``updated_at``: values set on
an incoming ``Book`` are ignored.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import ContextManager, Iterator, List, Optional, Protocol

from book_catalog_api.app.core.db import get_connection
from book_catalog_api.app.models.book import Book, BookStatus

logger = logging.getLogger(__name__)

BOOK_COLUMNS = "id, isbn, title, subtitle, copyright_year, status, created_at, updated_at"


class BookSession(Protocol):
    def create(self, book: Book) -> Book: ...

    def find_by_id(self, book_id: int) -> Optional[Book]: ...

    def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[Book]: ...

    def update(self, book: Book) -> Book: ...

    def delete(self, book: Book) -> None: ...

    def search_by_title_or_subtitle(self, substring: str) -> List[Book]: ...

    def count(self) -> int: ...


class BookStore(Protocol):
    def transaction(self) -> ContextManager[BookSession]: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _row_to_book(row: sqlite3.Row) -> Book:
    """Convert a database row to a ``Book``."""
    return Book(
        id=row["id"],
        isbn=row["isbn"],
        title=row["title"],
        subtitle=row["subtitle"] if row["subtitle"] is not None else "",
        copyright_year=row["copyright_year"],
        status=BookStatus(row["status"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SQLiteBookSession:
    """Book queries bound to a single open cursor."""

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor

    def create(self, book: Book) -> Book:
        now = _now()
        self.cursor.execute(
            """
            INSERT INTO books (isbn, title, subtitle, copyright_year, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                book.isbn,
                book.title,
                book.subtitle or "",
                book.copyright_year,
                book.status.name,
                now.isoformat(),
                now.isoformat(),
            ),
        )
        return replace(
            book,
            id=self.cursor.lastrowid,
            subtitle=book.subtitle or "",
            created_at=now,
            updated_at=now,
        )

    def find_by_id(self, book_id: int) -> Optional[Book]:
        row = self.cursor.execute(
            f"SELECT {BOOK_COLUMNS} FROM books WHERE id = ?",
            (book_id,),
        ).fetchone()
        if not row:
            return None
        return _row_to_book(row)

    def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[Book]:
        # SQLite treats a negative LIMIT as "no limit".
        rows = self.cursor.execute(
            f"SELECT {BOOK_COLUMNS} FROM books ORDER BY id ASC LIMIT ? OFFSET ?",
            (limit if limit is not None else -1, offset),
        ).fetchall()
        return [_row_to_book(row) for row in rows]

    def update(self, book: Book) -> Book:
        now = _now()
        self.cursor.execute(
            """
            UPDATE books
            SET isbn = ?, title = ?, subtitle = ?, copyright_year = ?, status = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                book.isbn,
                book.title,
                book.subtitle or "",
                book.copyright_year,
                book.status.name,
                now.isoformat(),
                book.id,
            ),
        )
        if self.cursor.rowcount == 0:
            raise sqlite3.IntegrityError(f"No book row with id {book.id} to update")
        return replace(book, subtitle=book.subtitle or "", updated_at=now)

    def delete(self, book: Book) -> None:
        self.cursor.execute("DELETE FROM books WHERE id = ?", (book.id,))

    def search_by_title_or_subtitle(self, substring: str) -> List[Book]:
        # instr() gives a literal substring match, so % and _ in the
        # query are not treated as LIKE wildcards.  casefold() is the
        # Python function registered per connection; SQLite lower() only
        # folds ASCII.
        needle = substring.casefold()
        rows = self.cursor.execute(
            f"""
            SELECT {BOOK_COLUMNS} FROM books
            WHERE instr(casefold(title), ?) > 0 OR instr(casefold(subtitle), ?) > 0
            ORDER BY id ASC
            """,
            (needle, needle),
        ).fetchall()
        return [_row_to_book(row) for row in rows]

    def count(self) -> int:
        row = self.cursor.execute("SELECT COUNT(*) AS total FROM books").fetchone()
        return row["total"]


class SQLiteBookStore:
    """Book store persisting to the SQLite file at ``database_path``."""

    def __init__(self, database_path: str) -> None:
        self.database_path = database_path

    @contextmanager
    def transaction(self) -> Iterator[SQLiteBookSession]:
        conn = get_connection(self.database_path)
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        try:
            yield SQLiteBookSession(conn.cursor())
            conn.commit()
        except Exception:
            logger.debug("Rolling back transaction on %s", self.database_path)
            conn.rollback()
            raise
        finally:
            conn.close()
