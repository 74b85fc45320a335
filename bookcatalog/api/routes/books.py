"""
Book API Routes

CRUD operations for book management: list, get, create, update, delete.
"""

import json

from fastapi import APIRouter, Depends, Request, status
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from bookcatalog.api.dependencies import get_book_repository
from bookcatalog.api.middleware.error_handler import (
    NotFoundError,
    StorageError,
    ValidationError,
    format_validation_errors,
)
from bookcatalog.api.schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    MessageResponse,
    ErrorResponse,
)
from bookcatalog.storage.book_repository import BookRepository, RepositoryError, StoredBook


router = APIRouter(prefix="/books", tags=["books"])


def _find_book(repo: BookRepository, book_id: str) -> StoredBook:
    """Fetch a book or raise NotFoundError. Lookup failures count as not found."""
    try:
        book = repo.get(book_id)
    except RepositoryError as e:
        logger.warning(f"Lookup of book {book_id} failed: {e}")
        book = None

    if book is None:
        raise NotFoundError("Book")
    return book


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.get(
    "",
    response_model=list[BookResponse],
    responses={
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
def list_books(repo: BookRepository = Depends(get_book_repository)):
    """List every book."""
    try:
        return repo.list_all()
    except RepositoryError:
        raise StorageError("Failed to retrieve books")


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def get_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Get a book by ID."""
    return _find_book(repo, book_id)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid book data"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
def create_book(
    book: BookCreate,
    repo: BookRepository = Depends(get_book_repository),
):
    """Create a new book. The id is assigned by the database."""
    logger.info(f"Creating book: {book.title} by {book.author}")

    try:
        return repo.create(**book.model_dump())
    except RepositoryError:
        raise StorageError("Failed to add book")


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed body"},
        404: {"model": ErrorResponse, "description": "Book not found"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def update_book(
    book_id: str,
    request: Request,
    repo: BookRepository = Depends(get_book_repository),
):
    """
    Update a book.

    The book must exist before the body is looked at. Only fields that are
    present and non-zero overwrite stored values; the id never changes.
    """
    existing = await run_in_threadpool(_find_book, repo, book_id)

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Invalid JSON body: {e}")

    try:
        update = BookUpdate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e.errors()))

    changes = update.changes()
    if not changes:
        return existing

    logger.info(f"Updating book {book_id}: {sorted(changes)}")

    try:
        updated = await run_in_threadpool(repo.update, book_id, **changes)
    except RepositoryError:
        raise StorageError("Failed to update book")

    # Deleted between the lookup and the write
    if updated is None:
        raise NotFoundError("Book")
    return updated


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Book not found"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
def delete_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Permanently delete a book."""
    _find_book(repo, book_id)

    logger.info(f"Deleting book: {book_id}")

    try:
        deleted = repo.delete(book_id)
    except RepositoryError:
        raise StorageError("Failed to delete book")

    if not deleted:
        raise NotFoundError("Book")
    return MessageResponse(message="Book deleted")
