#!/usr/bin/env python3
"""
Load the sample catalog into a Book Catalog SQLite database.

Migrations are applied first, so the script also works on a database
file that does not exist yet.  Nothing is inserted when the catalog
already holds books.

Usage:
    python seed_books.py --db ./book_catalog_api/book_catalog.db
"""

import argparse
import os
import sys
from typing import List, Optional

from book_catalog_api.app.core.config import settings
from book_catalog_api.app.core.db import get_database_path, init_db
from book_catalog_api.app.core.logging_config import setup_logging
from book_catalog_api.app.services.seed_service import seed_books
from book_catalog_api.app.stores.book_store import SQLiteBookStore


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the book catalog with sample books (SQLite).")
    ap.add_argument(
        "--db",
        help="Path to SQLite DB file. Defaults to DATABASE_URL resolved against the package root.",
    )
    args = ap.parse_args(argv)

    setup_logging(settings.log_level)
    database_path = os.path.abspath(args.db) if args.db else get_database_path()
    init_db(database_path)
    inserted = seed_books(SQLiteBookStore(database_path))
    if inserted:
        print(f"[+] Inserted {inserted} sample books into {database_path}")
    else:
        print(f"[=] Catalog in {database_path} is not empty; nothing inserted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
