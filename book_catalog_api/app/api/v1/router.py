"""
Top‑level router for version 1 of the API.

When new resources are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import books

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])
