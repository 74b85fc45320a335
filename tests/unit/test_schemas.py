"""
Unit tests for request/response schemas.
"""

import pytest
from pydantic import ValidationError

from bookcatalog.api.schemas import BookCreate, BookUpdate, BookResponse
from bookcatalog.storage.book_repository import StoredBook


VALID = {
    "title": "Dune",
    "author": "Herbert",
    "genre": "SciFi",
    "published_year": 1965,
    "isbn": "123",
}


class TestBookCreate:
    """Tests for BookCreate validation."""

    def test_valid_payload(self):
        book = BookCreate.model_validate(VALID)

        assert book.availability is False
        assert book.published_year == 1965

    @pytest.mark.parametrize("field", ["title", "author", "genre", "published_year", "isbn"])
    def test_missing_required_field(self, field):
        payload = {k: v for k, v in VALID.items() if k != field}

        with pytest.raises(ValidationError):
            BookCreate.model_validate(payload)

    @pytest.mark.parametrize(
        "field,value",
        [("title", ""), ("author", ""), ("genre", ""), ("isbn", ""), ("published_year", 0)],
    )
    def test_zero_value_counts_as_missing(self, field, value):
        with pytest.raises(ValidationError):
            BookCreate.model_validate({**VALID, field: value})

    def test_id_is_ignored(self):
        book = BookCreate.model_validate({**VALID, "id": 99})

        assert "id" not in book.model_dump()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("published_year", "1965"),
            ("published_year", 1965.0),
            ("published_year", True),
            ("availability", "yes"),
            ("availability", 1),
            ("title", 42),
        ],
    )
    def test_values_are_not_coerced(self, field, value):
        with pytest.raises(ValidationError):
            BookCreate.model_validate({**VALID, field: value})

    @pytest.mark.parametrize("year", [2**63, -(2**63) - 1, 10**20])
    def test_year_outside_integer_range(self, year):
        with pytest.raises(ValidationError):
            BookCreate.model_validate({**VALID, "published_year": year})

    def test_year_at_integer_limits(self):
        assert BookCreate.model_validate({**VALID, "published_year": 2**63 - 1}).published_year == 2**63 - 1
        assert BookCreate.model_validate({**VALID, "published_year": -(2**63)}).published_year == -(2**63)


class TestBookUpdate:
    """Tests for partial update semantics."""

    def test_only_supplied_fields(self):
        update = BookUpdate.model_validate({"availability": True})

        assert update.changes() == {"availability": True}

    def test_zero_values_are_dropped(self):
        update = BookUpdate.model_validate({
            "title": "",
            "published_year": 0,
            "availability": False,
            "genre": None,
            "isbn": "978",
        })

        assert update.changes() == {"isbn": "978"}

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            BookUpdate.model_validate({"published_year": "not a year"})

    @pytest.mark.parametrize(
        "payload",
        [{"published_year": "1965"}, {"availability": "true"}, {"isbn": 978}],
    )
    def test_values_are_not_coerced(self, payload):
        with pytest.raises(ValidationError):
            BookUpdate.model_validate(payload)

    def test_year_outside_integer_range(self):
        with pytest.raises(ValidationError):
            BookUpdate.model_validate({"published_year": 10**20})

    def test_non_object_rejected(self):
        with pytest.raises(ValidationError):
            BookUpdate.model_validate([1, 2, 3])


class TestBookResponse:
    """Tests for response serialization."""

    def test_from_stored_book(self):
        stored = StoredBook(id=7, availability=True, **VALID)

        response = BookResponse.model_validate(stored)

        assert response.model_dump() == {"id": 7, "availability": True, **VALID}

    def test_field_order(self):
        stored = StoredBook(id=7, **VALID)

        assert list(BookResponse.model_validate(stored).model_dump()) == [
            "id", "title", "author", "genre", "published_year", "isbn", "availability",
        ]
