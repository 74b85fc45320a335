"""
Access logging middleware.

One line per request in the spirit of an HTTP access log:
method, path, status, latency and client address. Each response carries an
``X-Request-ID`` header, reused from the request when the client sent one,
so a log line can be matched to the response a client saw.
"""

import time
import uuid
import json
import logging
from typing import Optional, Callable, FrozenSet
from dataclasses import dataclass

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("bookcatalog.access")


@dataclass
class LoggingConfig:
    """Access log settings."""

    enabled: bool = True
    excluded_paths: FrozenSet[str] = frozenset({"/health"})


class StructuredLogFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        access = getattr(record, "access", None)
        if access:
            entry.update(access)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes an access log line and tags the response with a request id."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        started = time.perf_counter()
        response = await call_next(request)
        latency_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers[REQUEST_ID_HEADER] = request_id

        path = request.url.path
        if self.config.enabled and path not in self.config.excluded_paths:
            client = request.client.host if request.client else "-"
            logger.log(
                _level_for(response.status_code),
                f"{response.status_code} | {latency_ms}ms | {client} | {request.method} {path}",
                extra={
                    "access": {
                        "request_id": request_id,
                        "method": request.method,
                        "path": path,
                        "status": response.status_code,
                        "latency_ms": latency_ms,
                        "client_ip": client,
                    }
                },
            )

        return response


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install the access log middleware.

    Args:
        app: FastAPI application instance.
        config: Access log settings.
        structured: Emit access lines as JSON instead of plain text.
    """
    if structured:
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False

    app.add_middleware(RequestLoggingMiddleware, config=config or LoggingConfig())
