"""
Book Catalog API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from loguru import logger

from bookcatalog import __version__
from .schemas import HealthResponse
from .routes import books
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
    get_cors_config,
)
from .dependencies import (
    get_settings,
    init_services,
    Settings,
)
from ..storage.book_repository import RepositoryError


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the database before the server accepts connections. If the
    database cannot be opened startup fails and the process exits.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting book catalog in {settings.environment} mode")

    try:
        services = init_services(settings)
    except RepositoryError as e:
        logger.critical(f"Failed to connect to database: {e}")
        raise

    app.state.services = services
    logger.info("Book catalog started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down book catalog...")
        services.close()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Book Catalog",
        description="CRUD service for a library book catalog.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ==========================================================================
    # Middleware (order matters - last added = outermost)
    # ==========================================================================

    setup_exception_handlers(app)

    # CORS headers on every response. Unhandled exceptions escape this
    # middleware; the catch-all handler adds the same headers itself.
    setup_cors(app, config=get_cors_config())

    # Logging (outermost - captures everything, including preflights)
    setup_logging(
        app,
        config=LoggingConfig(enabled=settings.request_logging),
        structured=settings.environment != "development",
    )

    # ==========================================================================
    # Routers
    # ==========================================================================

    app.include_router(books.router)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        services = getattr(request.app.state, "services", None)
        database_ok = services is not None and services.book_repository.ping()

        return HealthResponse(
            status="healthy" if database_ok else "degraded",
            version=__version__,
            database="healthy" if database_ok else "unhealthy",
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "bookcatalog.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
