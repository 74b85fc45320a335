"""
API Routes for the book catalog

Route modules:
- books: Book CRUD
"""

from bookcatalog.api.routes.books import router as books_router

__all__ = [
    "books_router",
]
