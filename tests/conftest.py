"""
Pytest configuration and fixtures for book catalog tests.
"""

from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from bookcatalog.api.main import create_app
from bookcatalog.api.dependencies import Settings, init_services
from bookcatalog.storage.book_repository import BookRepository


# =============================================================================
# Test Settings
# =============================================================================

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings configured for testing, backed by a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'library.db'}",
        database_echo=False,
        environment="test",
        debug=True,
        request_logging=False,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def repository(tmp_path: Path) -> Generator[BookRepository, None, None]:
    """Book repository over a fresh database file."""
    repo = BookRepository(f"sqlite:///{tmp_path / 'repo.db'}")
    yield repo
    repo.close()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app(test_settings):
    """Create FastAPI application for testing with storage initialized."""
    application = create_app(test_settings)

    # ASGITransport does not run the lifespan, so wire services up here
    services = init_services(test_settings)
    application.state.services = services

    yield application

    application.dependency_overrides.clear()
    services.close()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_book_data() -> dict:
    """Sample book data for testing."""
    return {
        "title": "Dune",
        "author": "Herbert",
        "genre": "SciFi",
        "published_year": 1965,
        "isbn": "123",
    }


@pytest.fixture
def sample_books_batch() -> list[dict]:
    """Multiple sample books for batch testing."""
    return [
        {
            "title": "1984",
            "author": "George Orwell",
            "genre": "Dystopian",
            "published_year": 1949,
            "isbn": "9780451524935",
            "availability": True,
        },
        {
            "title": "To Kill a Mockingbird",
            "author": "Harper Lee",
            "genre": "Classic",
            "published_year": 1960,
            "isbn": "9780061120084",
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "genre": "Romance",
            "published_year": 1813,
            "isbn": "9780141439518",
            "availability": True,
        },
    ]
