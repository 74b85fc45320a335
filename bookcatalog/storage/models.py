"""
Database models for the book catalog.
"""

from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BookModel(Base):
    """SQLAlchemy model for books."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    genre = Column(String, nullable=False)
    published_year = Column(Integer, nullable=False)

    # Duplicates are allowed
    isbn = Column(String, nullable=False)

    availability = Column(Boolean, nullable=False, default=False)
