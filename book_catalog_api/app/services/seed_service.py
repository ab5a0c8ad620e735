"""
Sample catalog data.

``seed_books`` is an explicit initialisation step: the application
startup hook calls it when ``SEED_SAMPLE_DATA`` is enabled and the
``seed_books.py`` script calls it on demand.  It only writes into an
empty catalog, so running it repeatedly is harmless.
"""

import logging
from typing import List

from book_catalog_api.app.models.book import Book, BookStatus
from book_catalog_api.app.stores.book_store import BookStore

SAMPLE_BOOKS: List[Book] = [
    Book(
        isbn="9780300267662",
        title="Why Architecture Matters",
        subtitle="A classic work on the joy of experiencing architecture",
        copyright_year=2023,
        status=BookStatus.APPROVED,
    ),
    Book(
        isbn="978-31-10914-67-5",
        title="The Death Penalty",
        copyright_year=2026,
        status=BookStatus.PENDING,
    ),
    Book(
        isbn="9783110545982",
        title="Qualitative Interviews",
        copyright_year=2025,
        status=BookStatus.REJECTED,
    ),
    Book(
        isbn="978-05-20392-30-4",
        title="Equality within Our Lifetimes",
        subtitle="A free ebook version of this title is available through Luminos",
        copyright_year=2000,
        status=BookStatus.APPROVED,
    ),
    Book(
        isbn="9780520392314",
        title="A General Theory of Crime",
        copyright_year=2022,
        status=BookStatus.APPROVED,
    ),
    Book(
        isbn="9780300268478",
        title="The Great New York Fire of 1776",
        subtitle="Who set the mysterious fire",
        copyright_year=2010,
        status=BookStatus.APPROVED,
    ),
]


def seed_books(store: BookStore) -> int:
    """Insert the sample books if the catalog is empty.

    Returns the number of books inserted (0 when data already exists).
    """
    logger = logging.getLogger(__name__)
    with store.transaction() as session:
        if session.count() > 0:
            logger.info("Catalog already populated; skipping sample data")
            return 0
        for book in SAMPLE_BOOKS:
            session.create(book)
    logger.info("Database initialized with %s sample books", len(SAMPLE_BOOKS))
    return len(SAMPLE_BOOKS)
