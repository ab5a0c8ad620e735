"""
Book endpoints for API v1.

These routes expose CRUD and search over the catalog.  Every response
uses the ``ApiResponse`` envelope: service failures are turned into an
envelope with ``error`` set and the status code of the error kind
(400 invalid request, 404 not found, 500 storage failure).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from book_catalog_api.app.api.deps import get_book_service
from book_catalog_api.app.core.errors import BookServiceError
from book_catalog_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from book_catalog_api.app.schemas.response import ApiResponse
from book_catalog_api.app.services.book_service import BookService

router = APIRouter()


def error_response(error: BookServiceError) -> JSONResponse:
    """Render a service error as an envelope with the matching status code."""
    return JSONResponse(
        status_code=error.status_code,
        content=ApiResponse.fail(error.message).to_json(),
    )


@router.post("/", response_model=ApiResponse[BookRead], status_code=status.HTTP_201_CREATED)
async def create_book(
    book_in: BookCreate,
    service: BookService = Depends(get_book_service),
):
    """Create a new book."""
    result = await service.create(book_in)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[BookRead].ok(result.value, message="Book created successfully")


@router.get("/", response_model=ApiResponse[List[BookRead]])
async def list_books(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: BookService = Depends(get_book_service),
):
    """Return all books ordered by id, optionally paginated."""
    result = await service.get_all(limit=limit, offset=offset)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[List[BookRead]].ok(result.value)


@router.get("/search", response_model=ApiResponse[List[BookRead]])
async def search_books(
    query: Optional[str] = Query(None, description="Text matched against title and subtitle"),
    service: BookService = Depends(get_book_service),
):
    """Search books by title or subtitle (case-insensitive substring)."""
    if query is None or not query.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ApiResponse.fail("Query parameter is required").to_json(),
        )
    result = await service.search(query)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[List[BookRead]].ok(result.value)


@router.get("/{book_id}", response_model=ApiResponse[BookRead])
async def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
):
    """Retrieve a single book by ID."""
    result = await service.get_one(book_id)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[BookRead].ok(result.value)


@router.patch("/", response_model=ApiResponse[BookRead])
async def update_book(
    book_in: BookUpdate,
    service: BookService = Depends(get_book_service),
):
    """Update the book identified by ``id`` in the request body."""
    result = await service.update(book_in)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[BookRead].ok(result.value)


@router.put("/{book_id}", response_model=ApiResponse[BookRead])
async def replace_book_fields(
    book_id: str,
    book_in: BookUpdate,
    service: BookService = Depends(get_book_service),
):
    """Update the book identified by the path; a body ``id`` is ignored."""
    result = await service.update(book_in, book_id=book_id)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[BookRead].ok(result.value)


@router.delete("/{book_id}", response_model=ApiResponse[None])
async def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
):
    """Delete a book permanently."""
    result = await service.delete(book_id)
    if not result.ok:
        return error_response(result.error)
    return ApiResponse[None].ok(message="Book deleted successfully")
