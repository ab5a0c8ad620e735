"""
Persistence layer.

A store hands out transactions; every read and write of a book happens
through the session yielded by ``transaction()``.
"""

from .book_store import BookSession, BookStore, SQLiteBookStore  # noqa: F401
