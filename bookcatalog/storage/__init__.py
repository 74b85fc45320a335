"""
Storage Module for the book catalog

Persistent storage for book records:
- SQLite single-file database via SQLAlchemy
- Schema created on startup
"""

from bookcatalog.storage.models import Base, BookModel
from bookcatalog.storage.book_repository import (
    BookRepository,
    RepositoryError,
    StoredBook,
)

__all__ = [
    "Base",
    "BookModel",
    "BookRepository",
    "RepositoryError",
    "StoredBook",
]
