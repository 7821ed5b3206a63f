"""
Access Log Middleware

Writes one line per request to the "business_api.access" logger:

    POST /businesses/search 404 3.41ms IP:10.0.0.7

The level tracks the outcome (ERROR for 5xx, WARNING for 4xx, INFO
otherwise) and health probes drop to DEBUG. The elapsed time is also
returned to the caller in the X-Process-Time header, in seconds.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

# Handlers and level come from core.bootstrap.configure_logging
logger = logging.getLogger("business_api.access")

HEALTH_PATHS = frozenset({"/", "/health"})


def access_log_level(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.DEBUG if path in HEALTH_PATHS else logging.INFO


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Times each request and logs method, path, status and client."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        path = request.url.path
        logger.log(
            access_log_level(path, response.status_code),
            f"{request.method} {path} {response.status_code} "
            f"{elapsed * 1000:.2f}ms IP:{get_client_ip(request)}"
        )
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
