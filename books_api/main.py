"""
FastAPI main application for the books API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from books_api.config import APIConfig, config as api_config
from books_api.database import BookStore, StorageError
from books_api.models import (
    Book, BookCreatedResponse, BookInput,
    ErrorResponse, HealthResponse, MessageResponse
)
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)

BOOK_NOT_FOUND = "Book not found"

ERROR_RESPONSES = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Storage error"},
}
NOT_FOUND_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": BOOK_NOT_FOUND},
    **ERROR_RESPONSES,
}


def get_store(request: Request) -> BookStore:
    """Resolve the storage handle installed on the application."""
    return request.app.state.store


def storage_failure(exc: StorageError) -> HTTPException:
    """Map a storage error to a 500 carrying the raw engine message."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc)
    )


def not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=BOOK_NOT_FOUND
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: APIConfig = app.state.settings
    store: BookStore = app.state.store

    # Startup
    logger.info("Starting books API", database=store.database_path)
    try:
        await store.connect()
        await store.ensure_schema()
    except StorageError as e:
        # Requests will fail with 500 until the database becomes usable
        logger.error("Failed to initialize database", error=str(e))
    logger.info("Server is running", docs_url=settings.docs_url())

    yield

    # Shutdown
    logger.info("Shutting down books API")
    await store.disconnect()


def create_app(
    store: Optional[BookStore] = None,
    settings: Optional[APIConfig] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Storage handle; defaults to one opened on ``settings.database_path``
        settings: Configuration; defaults to the environment-driven config

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = api_config
    if store is None:
        store = BookStore(settings.database_path)

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        debug=settings.debug
    )

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        servers=[{"url": settings.public_url}],
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).body(),
            headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if settings.debug else None
            ).body()
        )

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(store: BookStore = Depends(get_store)):
        """Health check endpoint."""
        health_info = await store.health_check()
        db_status = health_info.get("status", "unknown")
        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=settings.api_version,
            database_status=db_status
        )

    # Books endpoints
    @app.get(
        "/books",
        response_model=List[Book],
        responses=ERROR_RESPONSES,
        tags=["Books"],
        summary="List all books",
    )
    async def list_books(store: BookStore = Depends(get_store)):
        """Get every book."""
        try:
            return await store.list_all()
        except StorageError as e:
            raise storage_failure(e)

    @app.post(
        "/books",
        response_model=BookCreatedResponse,
        status_code=status.HTTP_201_CREATED,
        responses=ERROR_RESPONSES,
        tags=["Books"],
        summary="Create a book",
    )
    async def create_book(book: BookInput, store: BookStore = Depends(get_store)):
        """
        Create a book and return its generated ID.

        Missing fields are stored as null; a missing **year** is rejected by
        the database and reported as a 500.
        """
        try:
            book_id = await store.insert(book)
        except StorageError as e:
            raise storage_failure(e)

        logger.info("Book created", book_id=book_id)
        return BookCreatedResponse(id=book_id)

    @app.get(
        "/books/{book_id}",
        response_model=Book,
        responses=NOT_FOUND_RESPONSES,
        tags=["Books"],
        summary="Get a book by ID",
    )
    async def get_book(book_id: int, store: BookStore = Depends(get_store)):
        """
        Get a single book by ID.

        - **book_id**: Book ID
        """
        try:
            book = await store.get_by_id(book_id)
        except StorageError as e:
            raise storage_failure(e)

        if book is None:
            raise not_found()
        return book

    @app.put(
        "/books/{book_id}",
        response_model=MessageResponse,
        responses=NOT_FOUND_RESPONSES,
        tags=["Books"],
        summary="Replace a book",
    )
    async def update_book(book_id: int, book: BookInput, store: BookStore = Depends(get_store)):
        """Overwrite every field of a book; fields left out become null."""
        try:
            changes = await store.update(book_id, book)
        except StorageError as e:
            raise storage_failure(e)

        if changes == 0:
            raise not_found()
        logger.info("Book updated", book_id=book_id)
        return MessageResponse(message="Book updated successfully")

    @app.delete(
        "/books/{book_id}",
        response_model=MessageResponse,
        responses=NOT_FOUND_RESPONSES,
        tags=["Books"],
        summary="Delete a book",
    )
    async def delete_book(book_id: int, store: BookStore = Depends(get_store)):
        try:
            changes = await store.delete_by_id(book_id)
        except StorageError as e:
            raise storage_failure(e)

        if changes == 0:
            raise not_found()
        logger.info("Book deleted", book_id=book_id)
        return MessageResponse(message="Book deleted successfully")

    return app


app = create_app()
