"""
Book Repository for the book catalog

Structured storage for book records using SQLAlchemy:
- SQLite single-file database (one engine per process)
- Table created on first use
- Hard deletes

Design Decisions:
1. SQLAlchemy ORM: Portable across databases
2. One short-lived session per call: the engine's pool serializes access
3. Errors wrapped: callers only ever see RepositoryError
"""

from dataclasses import dataclass
from typing import Optional, Union
from loguru import logger

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .models import Base, BookModel

# SQLite INTEGER storage range
MAX_SQLITE_INTEGER = 2**63 - 1
MIN_SQLITE_INTEGER = -(2**63)


class RepositoryError(Exception):
    """Raised when the underlying database operation fails."""


@dataclass
class StoredBook:
    """Data class for book data transfer."""

    id: int
    title: str
    author: str
    genre: str
    published_year: int
    isbn: str
    availability: bool = False

    @classmethod
    def from_model(cls, model: BookModel) -> "StoredBook":
        """Create from SQLAlchemy model."""
        return cls(
            id=model.id,
            title=model.title,
            author=model.author,
            genre=model.genre,
            published_year=model.published_year,
            isbn=model.isbn,
            availability=bool(model.availability),
        )


def _parse_id(book_id: Union[int, str]) -> Optional[int]:
    """
    Turn a path id into a primary key, or None if it cannot name a row.

    Only plain ASCII digit strings are accepted (no sign, whitespace or
    underscores), and the value must fit a signed 64-bit SQLite INTEGER.
    """
    if isinstance(book_id, bool):
        return None
    if isinstance(book_id, int):
        pk = book_id
    elif isinstance(book_id, str) and book_id.isascii() and book_id.isdigit():
        pk = int(book_id)
    else:
        return None

    if not MIN_SQLITE_INTEGER <= pk <= MAX_SQLITE_INTEGER:
        return None
    return pk


class BookRepository:
    """
    Repository for book CRUD operations.

    Usage:
        repo = BookRepository("sqlite:///./library.db")

        book = repo.create(
            title="Dune",
            author="Frank Herbert",
            genre="SciFi",
            published_year=1965,
            isbn="9780441172719",
        )

        repo.update(book.id, availability=True)
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
    ):
        """
        Initialize repository and make sure the schema exists.

        Args:
            database_url: SQLAlchemy database URL
            echo: Log emitted SQL

        Raises:
            RepositoryError: If the database cannot be opened or the
                schema cannot be created.
        """
        if database_url:
            # Strip async drivers for sync engine
            self.database_url = database_url.replace("+aiosqlite", "")
        else:
            # Default to in-memory SQLite
            self.database_url = "sqlite:///:memory:"

        engine_kwargs = {"echo": echo}
        if self.database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.database_url or self.database_url == "sqlite://":
                # Every session must see the same in-memory database
                engine_kwargs["poolclass"] = StaticPool

        try:
            self.engine = create_engine(self.database_url, **engine_kwargs)
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise RepositoryError(
                f"Failed to open database {self.database_url}: {e}"
            ) from e

        # Session factory
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        logger.info(f"BookRepository initialized: {self.database_url[:50]}")

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def ping(self) -> bool:
        """Check the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def create(
        self,
        title: str,
        author: str,
        genre: str,
        published_year: int,
        isbn: str,
        availability: bool = False,
    ) -> StoredBook:
        """
        Create a new book. The id is assigned by the database.

        Returns:
            Created StoredBook
        """
        try:
            with self.get_session() as session:
                book = BookModel(
                    title=title,
                    author=author,
                    genre=genre,
                    published_year=published_year,
                    isbn=isbn,
                    availability=availability,
                )
                session.add(book)
                session.commit()
                session.refresh(book)

                return StoredBook.from_model(book)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create book '{title}': {e}")
            raise RepositoryError(str(e)) from e

    def get(self, book_id: Union[int, str]) -> Optional[StoredBook]:
        """
        Get book by ID.

        Args:
            book_id: Book ID; malformed ids never match

        Returns:
            StoredBook or None
        """
        pk = _parse_id(book_id)
        if pk is None:
            return None

        try:
            with self.get_session() as session:
                book = session.get(BookModel, pk)
                if book:
                    return StoredBook.from_model(book)
                return None
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch book {book_id}: {e}")
            raise RepositoryError(str(e)) from e

    def list_all(self) -> list[StoredBook]:
        """
        List every book in storage order.

        Returns:
            List of StoredBooks
        """
        try:
            with self.get_session() as session:
                books = session.query(BookModel).all()
                return [StoredBook.from_model(b) for b in books]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list books: {e}")
            raise RepositoryError(str(e)) from e

    def update(
        self,
        book_id: Union[int, str],
        **updates,
    ) -> Optional[StoredBook]:
        """
        Update book fields.

        Unknown keys and the primary key are ignored.

        Args:
            book_id: Book ID
            **updates: Fields to update

        Returns:
            Updated StoredBook or None if the book does not exist
        """
        pk = _parse_id(book_id)
        if pk is None:
            return None

        try:
            with self.get_session() as session:
                book = session.get(BookModel, pk)
                if not book:
                    return None

                for key, value in updates.items():
                    if key != "id" and hasattr(book, key):
                        setattr(book, key, value)

                session.commit()
                session.refresh(book)

                return StoredBook.from_model(book)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update book {book_id}: {e}")
            raise RepositoryError(str(e)) from e

    def delete(self, book_id: Union[int, str]) -> bool:
        """
        Hard-delete a book.

        Args:
            book_id: Book ID

        Returns:
            True if deleted
        """
        pk = _parse_id(book_id)
        if pk is None:
            return False

        try:
            with self.get_session() as session:
                book = session.get(BookModel, pk)
                if not book:
                    return False

                session.delete(book)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete book {book_id}: {e}")
            raise RepositoryError(str(e)) from e
