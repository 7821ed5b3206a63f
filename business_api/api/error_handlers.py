"""
Error Handlers: global exception handlers for the business directory API.

Mapping:
    - BusinessDirectoryException -> its http_status with {"error": message}
    - RequestValidationError (malformed JSON / wrong types) -> 400
    - SQLAlchemyError that escaped the services -> 500 StorageFailure
    - Exception (catch-all) -> 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from business_api.core.exceptions import BusinessDirectoryException, StorageFailureError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(BusinessDirectoryException)
    async def domain_error_handler(request: Request, exc: BusinessDirectoryException):
        if isinstance(exc, StorageFailureError):
            logger.error(
                f"{exc.message} on {request.method} {request.url.path}",
                exc_info=exc.original_error,
            )
            return JSONResponse(
                status_code=exc.http_status,
                content={"error": INTERNAL_ERROR_MESSAGE},
            )

        logger.info(f"{request.method} {request.url.path} -> {exc.http_status}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": _describe_errors(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Database error on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )


def _describe_errors(exc: RequestValidationError) -> list[dict]:
    """Field-level details without echoing the submitted values."""
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
