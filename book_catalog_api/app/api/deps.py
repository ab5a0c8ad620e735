"""FastAPI dependencies shared by the endpoint modules."""

from book_catalog_api.app.core.db import get_database_path
from book_catalog_api.app.services.book_service import BookService
from book_catalog_api.app.stores.book_store import SQLiteBookStore


def get_book_service() -> BookService:
    """Build a ``BookService`` over the configured SQLite database.

    Tests replace this dependency through ``app.dependency_overrides``.
    """
    return BookService(SQLiteBookStore(get_database_path()))
