"""Exception handlers mapping failures onto generic JSON responses."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core import CourseError, ValidationError

logger = logging.getLogger(__name__)


def error_response(request: Request, exc: CourseError) -> JSONResponse:
    """Log ``exc`` with its failing step and render the client-safe body."""

    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "%s %s failed at step=%s: %s",
        request.method,
        request.url.path,
        exc.step or "-",
        exc,
    )
    return JSONResponse(
        {"error": exc.public_message, "message": exc.client_message},
        status_code=exc.status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CourseError)
    async def _course_error(request: Request, exc: CourseError) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = ", ".join(
            ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "body"
            for error in exc.errors()
        )
        return error_response(
            request, ValidationError(f"Invalid request: {fields}", step="request")
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        production = request.app.state.settings.is_production
        return JSONResponse(
            {
                "error": "Internal server error",
                "message": None if production else str(exc),
                "stack": None if production else traceback.format_exc(),
            },
            status_code=500,
        )


__all__ = ["error_response", "register_exception_handlers"]
