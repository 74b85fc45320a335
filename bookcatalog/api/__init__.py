"""
Book Catalog - FastAPI Backend.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_book_repository,
    get_service_container,
    init_services,
    ServiceContainer,
)
from .schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    MessageResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_book_repository",
    "get_service_container",
    "init_services",
    "ServiceContainer",
    # Schemas
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse",
]
