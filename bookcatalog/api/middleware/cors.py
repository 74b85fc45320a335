"""
CORS Configuration

Permissive Cross-Origin Resource Sharing for browser frontends. The headers
are set on every response, not only when an Origin header is present, and
every OPTIONS request is answered directly as a preflight.
"""

from typing import Callable, List, Optional
from dataclasses import dataclass, field
import os

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


@dataclass
class CORSConfig:
    """CORS configuration settings."""

    allow_origin: str = "*"

    allowed_methods: List[str] = field(default_factory=lambda: [
        "GET", "POST", "PUT", "DELETE"
    ])

    allowed_headers: List[str] = field(default_factory=lambda: [
        "Content-Type",
    ])

    def headers(self) -> dict[str, str]:
        """Response headers derived from this config."""
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Methods": ", ".join(self.allowed_methods),
            "Access-Control-Allow-Headers": ", ".join(self.allowed_headers),
        }


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def get_cors_config() -> CORSConfig:
    """Get CORS configuration, allowing overrides from the environment."""
    config = CORSConfig()

    origin = os.getenv("CORS_ALLOW_ORIGIN")
    if origin:
        config.allow_origin = origin.strip()

    methods = os.getenv("CORS_ALLOW_METHODS")
    if methods:
        config.allowed_methods = [m.upper() for m in _split(methods)]

    headers = os.getenv("CORS_ALLOW_HEADERS")
    if headers:
        config.allowed_headers = _split(headers)

    return config


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Adds CORS headers to every response.

    OPTIONS requests short-circuit with 200 and an empty body; the route
    handler is never called.
    """

    def __init__(self, app: FastAPI, config: Optional[CORSConfig] = None):
        super().__init__(app)
        self.config = config or CORSConfig()
        self._headers = self.config.headers()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self._headers)

        response = await call_next(request)
        response.headers.update(self._headers)
        return response


def setup_cors(app: FastAPI, config: Optional[CORSConfig] = None) -> None:
    """
    Configure CORS middleware for the FastAPI application.

    Args:
        app: FastAPI application instance.
        config: CORS configuration. If None, loads from environment.
    """
    if config is None:
        config = get_cors_config()

    # Read by the catch-all error handler, which runs outside this middleware
    app.state.cors_config = config
    app.add_middleware(CORSMiddleware, config=config)
