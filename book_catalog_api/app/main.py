"""
Main entrypoint for the Book Catalog API.

This module assembles the FastAPI application, sets up logging, installs
the envelope-shaped exception handlers and includes versioned routers.
The ``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn book_catalog_api.app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import get_database_path, init_db
from .core.logging_config import setup_logging
from .schemas.response import ApiResponse
from .services.seed_service import seed_books
from .stores.book_store import SQLiteBookStore


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" segment.
        location = ".".join(str(item) for item in err.get("loc", ())[1:])
        message = err.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _format_validation_errors(exc)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ApiResponse.invalid(message).to_json(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ApiResponse.fail("Internal server error").to_json(),
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations,
        # then loads the sample catalog into an empty database.
        database_path = get_database_path()
        init_db(database_path)
        if settings.seed_sample_data:
            seed_books(SQLiteBookStore(database_path))

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
