"""Error Handlers — global exception handlers for the translator API.

Invariants:
    - TranslatorError → {success: false, message, error: {code, ...}} with the error's http_status
    - RequestValidationError → 400 with field-level error details
    - HTTPException (404 for unknown routes, 405, ...) → same envelope
    - Exception (catch-all) → never leaks internal details
    - RateLimitExceededError additionally sets the Retry-After header

Design Decisions:
    - Four-layer handler: domain (TranslatorError), validation (Pydantic),
      framework (HTTPException), catch-all (Exception)
    - Extracted from main.py to keep the app factory short
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    TranslatorError, RateLimitExceededError, ErrorSeverity,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_translator_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def error_json_response(exc: TranslatorError) -> JSONResponse:
    """Render a TranslatorError; shared with the middleware layer."""
    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after_seconds)}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


def _register_translator_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(TranslatorError)
    async def translator_error_handler(request: Request, exc: TranslatorError):
        """Handle all translator domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"TranslatorError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return error_json_response(exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register framework HTTPException handler (unknown routes, bad methods)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            content = exc.detail
        else:
            message = (
                f"Route {request.url.path} not found"
                if exc.status_code == 404 else str(exc.detail)
            )
            content = {
                "success": False,
                "message": message,
                "error": {
                    "code": "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR",
                    "message": message,
                    "category": "request",
                    "severity": ErrorSeverity.WARNING.value,
                },
            }
        return JSONResponse(
            status_code=exc.status_code, content=content,
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error",
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "success": False,
        "message": "Invalid request data",
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
