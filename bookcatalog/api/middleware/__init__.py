"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- CORS headers and preflight
- Request/response logging
"""

from .error_handler import (
    BookCatalogException,
    ValidationError,
    NotFoundError,
    StorageError,
    setup_exception_handlers,
    create_error_response,
    format_validation_errors,
)

from .cors import (
    CORSConfig,
    CORSMiddleware,
    get_cors_config,
    setup_cors,
)

from .logging import (
    LoggingConfig,
    StructuredLogFormatter,
    RequestLoggingMiddleware,
    setup_logging,
)


__all__ = [
    # Error handling
    "BookCatalogException",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "setup_exception_handlers",
    "create_error_response",
    "format_validation_errors",
    # CORS
    "CORSConfig",
    "CORSMiddleware",
    "get_cors_config",
    "setup_cors",
    # Logging
    "LoggingConfig",
    "StructuredLogFormatter",
    "RequestLoggingMiddleware",
    "setup_logging",
]
