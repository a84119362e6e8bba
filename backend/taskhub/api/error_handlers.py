"""Error Handlers — global exception handlers for the TaskHub API.

Invariants:
    - TaskHubError -> {"success": false, "error": {code, message, ...}} with its http_status
    - RequestValidationError -> 400 with field-level error details
    - HTTPException (unknown route, bad method) -> same envelope shape
    - Exception (catch-all) -> 500, never leaks internal details outside development

Design Decisions:
    - Four handlers: domain, validation, HTTP, catch-all
    - Traceback attached under error.debug only when include_debug is set
      (ENVIRONMENT=development)
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskhub.core.errors import TaskHubError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, include_debug: bool = False) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_taskhub_error_handler(app, include_debug)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app, include_debug)


def _register_taskhub_error_handler(app: FastAPI, include_debug: bool) -> None:
    """Register TaskHub domain/infrastructure error handler."""

    @app.exception_handler(TaskHubError)
    async def taskhub_error_handler(request: Request, exc: TaskHubError):
        """Handle all TaskHub domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"TaskHubError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        content = exc.to_response()
        if include_debug:
            content["error"]["debug"] = _debug_info(exc)
        return JSONResponse(status_code=exc.http_status, content=content)


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

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": {
                    "code": "HTTP_ERROR",
                    "message": str(exc.detail),
                    "category": "http",
                    "severity": ErrorSeverity.WARNING.value,
                },
            },
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI, include_debug: bool) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        content = {
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        }
        if include_debug:
            content["error"]["debug"] = _debug_info(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content,
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "success": False,
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


def _debug_info(exc: BaseException) -> dict:
    return {
        "type": type(exc).__name__,
        "traceback": traceback.format_exception(exc),
    }
