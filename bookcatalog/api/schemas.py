"""
API Schemas for the book catalog

Pydantic models for request validation and response serialization.

Design Decisions:
1. Presence checks only: required strings must be non-empty and the year
   non-zero; no format validation of ISBNs or years
2. Strict types: "1965" is not a year and "yes" is not a boolean
3. Separate Request/Response: Clear distinction between inputs and outputs
4. Zero values in updates mean "leave unchanged"
"""

from typing import Optional, Any

from pydantic import BaseModel, Field, field_validator, ConfigDict

from bookcatalog.storage.book_repository import MAX_SQLITE_INTEGER, MIN_SQLITE_INTEGER


# =============================================================================
# Book Schemas
# =============================================================================

class BookCreate(BaseModel):
    """Book creation request. Any ``id`` in the payload is ignored."""

    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    genre: str = Field(..., min_length=1)
    published_year: int = Field(..., ge=MIN_SQLITE_INTEGER, le=MAX_SQLITE_INTEGER)
    isbn: str = Field(..., min_length=1)
    availability: bool = False

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "example": {
                "title": "Dune",
                "author": "Frank Herbert",
                "genre": "SciFi",
                "published_year": 1965,
                "isbn": "9780441172719",
                "availability": True,
            }
        }
    )

    @field_validator("published_year")
    @classmethod
    def year_must_be_set(cls, v: int) -> int:
        if v == 0:
            raise ValueError("published_year is required")
        return v


class BookUpdate(BaseModel):
    """Book update request (partial)."""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_year: Optional[int] = Field(None, ge=MIN_SQLITE_INTEGER, le=MAX_SQLITE_INTEGER)
    isbn: Optional[str] = None
    availability: Optional[bool] = None

    model_config = ConfigDict(strict=True)

    def changes(self) -> dict[str, Any]:
        """
        Fields that should overwrite stored values.

        Omitted fields and zero values ("", 0, false, null) are dropped, so
        a field cannot be cleared or reset to false through an update.
        """
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value
        }


class BookResponse(BaseModel):
    """Book response model."""

    id: int
    title: str
    author: str
    genre: str
    published_year: int
    isbn: str
    availability: bool = False

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Generic Schemas
# =============================================================================

class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ErrorResponse(BaseModel):
    """Error payload returned for every failed request."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: str
