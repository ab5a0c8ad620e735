"""Global test fixtures."""

import os
import tempfile

# Settings are read at import time, so the environment must be prepared
# before any test module imports the application package.
os.environ["DATABASE_URL"] = os.path.join(tempfile.mkdtemp(prefix="book-catalog-"), "test.db")
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from book_catalog_api.app.api.deps import get_book_service  # noqa: E402
from book_catalog_api.app.core.db import init_db  # noqa: E402
from book_catalog_api.app.main import app  # noqa: E402
from book_catalog_api.app.schemas.book import BookCreate  # noqa: E402
from book_catalog_api.app.services.book_service import BookService  # noqa: E402
from book_catalog_api.app.stores.book_store import SQLiteBookStore  # noqa: E402


@pytest.fixture
def db_path(tmp_path) -> str:
    """Create a migrated, empty database file."""
    path = str(tmp_path / "books.db")
    init_db(path)
    return path


@pytest.fixture
def store(db_path: str) -> SQLiteBookStore:
    return SQLiteBookStore(db_path)


@pytest.fixture
def service(store: SQLiteBookStore) -> BookService:
    return BookService(store)


@pytest.fixture
def create_request() -> BookCreate:
    return BookCreate(
        isbn="978-0-123456-78-9",
        title="Test Book",
        subtitle="Test Subtitle",
        copyright_year=2023,
        status="PENDING",
    )


@pytest.fixture
def client(service: BookService):
    """HTTP client whose endpoints use the per-test ``service``."""
    app.dependency_overrides[get_book_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
