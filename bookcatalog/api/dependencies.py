"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- The storage handle (book repository)
"""

import os
from typing import Optional
from functools import lru_cache
from dataclasses import dataclass

from fastapi import Depends, Request
from loguru import logger

from ..storage.book_repository import BookRepository


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./library.db"
    database_echo: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_level: str = "INFO"
    request_logging: bool = True

    # Environment
    environment: str = "development"
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", cls.port)),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            request_logging=os.getenv("REQUEST_LOGGING", "true").lower() == "true",
            environment=os.getenv("BOOKCATALOG_ENV", cls.environment),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container
# =============================================================================

class ServiceContainer:
    """
    Holds the process-wide services built at startup.

    The book repository is created eagerly so that an unusable database
    fails startup instead of the first request.
    """

    def __init__(self, settings: Settings, book_repository: Optional[BookRepository] = None):
        self.settings = settings
        self.book_repository = book_repository or BookRepository(
            settings.database_url,
            echo=settings.database_echo,
        )

    def close(self) -> None:
        """Release resources held by the services."""
        self.book_repository.close()


def init_services(settings: Settings) -> ServiceContainer:
    """
    Initialize service container.

    Raises:
        RepositoryError: If the database cannot be opened.
    """
    logger.info(f"Opening database {settings.database_url}")
    return ServiceContainer(settings)


def get_service_container(request: Request) -> ServiceContainer:
    """Get the service container attached to the running application."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Call init_services first.")
    return services


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_book_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> BookRepository:
    """Dependency for book repository."""
    return container.book_repository
