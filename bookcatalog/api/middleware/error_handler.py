"""
Error Handling for the book catalog

Centralized error handling:
- Every error response has the shape {"error": "<message>"}
- Logging of errors
- Exception translation (validation -> 400, HTTP errors, unexpected -> 500)
"""

import traceback
from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class BookCatalogException(Exception):
    """Base exception for book catalog errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(BookCatalogException):
    """Request body missing fields or not decodable."""

    status_code = 400


class NotFoundError(BookCatalogException):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str = "Book"):
        super().__init__(f"{resource} not found")


class StorageError(BookCatalogException):
    """Database failure. The message is generic; the cause is only logged."""

    status_code = 500


def create_error_response(error: str, status_code: int) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(status_code=status_code, content={"error": error})


def format_validation_errors(errors: Sequence[dict[str, Any]]) -> str:
    """
    Flatten pydantic error dicts into a single readable message.

    Locations are reported without the leading "body" segment, e.g.
    ``title: Field required; published_year: Input should be a valid integer``.
    """
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        msg = err.get("msg", "Invalid value")
        if err.get("type") == "json_invalid":
            detail = (err.get("ctx") or {}).get("error")
            parts.append(f"Invalid JSON body: {detail}" if detail else "Invalid JSON body")
        elif loc:
            parts.append(f"{'.'.join(loc)}: {msg}")
        else:
            parts.append(msg)
    return "; ".join(parts) or "Invalid request body"


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(BookCatalogException)
    async def book_catalog_exception_handler(request: Request, exc: BookCatalogException):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path}: {exc.message}")
        return create_error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = format_validation_errors(exc.errors())
        logger.warning(f"Validation error: {message}")
        return create_error_response(message, 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n"
            + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        )
        # Don't expose internal error details
        response = create_error_response("Internal Server Error", 500)
        cors_config = getattr(request.app.state, "cors_config", None)
        if cors_config is not None:
            response.headers.update(cors_config.headers())
        return response
