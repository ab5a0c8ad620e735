"""
Plain domain records.

Models here carry data and validation only; persistence lives in
``stores`` and is reached through the service layer.
"""

from .book import Book, BookStatus  # noqa: F401
