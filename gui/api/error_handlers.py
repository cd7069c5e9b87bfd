"""Error Handlers — global exception handlers mapping errors to HTTP outcomes.

Invariants:
    - GuiError → ERROR_OUTCOMES[kind]: a redirect (302 /login, 303
      /refresh_token?ref=...) or an error page with the mapped status
    - AUTHENTICATION redirects carry the failing request's path as `ref`
    - RequestValidationError → 400 error page
    - Exception (catch-all) → 500 error page, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (GuiError), validation (FastAPI), catch-all
    - Extracted from main.py so routes and tests share one registration call
"""

import logging
from urllib.parse import quote

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.responses import RedirectResponse, Response

from gui.api.responses import templates
from gui.core.errors import ErrorKind, ErrorSeverity, GuiError

logger = logging.getLogger(__name__)

_PUBLIC_MESSAGES = {
    ErrorKind.MALFORMED_DATA: "The submitted data could not be processed.",
    ErrorKind.MALFORMED_SUBTOPIC: "The message subtopic is malformed.",
    ErrorKind.UNAUTHORIZED_ACCESS: "You are not allowed to perform this action.",
    ErrorKind.PERMISSION_DENIED: "The thing key is not allowed on this channel.",
    ErrorKind.BACKEND_UNAVAILABLE: "A platform service is unavailable.",
    ErrorKind.INTERNAL: "An unexpected error occurred.",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gui_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def refresh_location(request: Request, base: str) -> str:
    ref = request.url.path
    if request.url.query:
        ref = f"{ref}?{request.url.query}"
    return f"{base}?ref={quote(ref, safe='')}"


def error_page(request: Request, status_code: int, kind: ErrorKind, detail: str = "") -> Response:
    return templates.TemplateResponse(
        request, "error.html",
        {
            "status": status_code,
            "kind": kind.value,
            "message": _PUBLIC_MESSAGES.get(kind, _PUBLIC_MESSAGES[ErrorKind.INTERNAL]),
            "detail": detail,
        },
        status_code=status_code,
    )


def _register_gui_error_handler(app: FastAPI) -> None:
    """Register GUI domain/infrastructure error handler."""

    @app.exception_handler(GuiError)
    async def gui_error_handler(request: Request, exc: GuiError):
        """Map a GuiError through the outcome table."""
        outcome = exc.outcome
        log = logger.warning if exc.severity != ErrorSeverity.CRITICAL else logger.error
        log(
            f"GuiError: {exc.message}",
            extra={
                "error_code": exc.code,
                "route": request.url.path,
                "status_code": outcome.status,
                "backend_status": getattr(exc, "status_code", None),
            },
        )
        if outcome.location:
            location = outcome.location
            if exc.kind == ErrorKind.AUTHENTICATION:
                location = refresh_location(request, location)
            return RedirectResponse(location, status_code=outcome.status)
        detail = exc.message if exc.kind in (
            ErrorKind.MALFORMED_DATA, ErrorKind.MALFORMED_SUBTOPIC,
        ) else ""
        return error_page(request, outcome.status, exc.kind, detail)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register request validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return error_page(
            request, status.HTTP_400_BAD_REQUEST, ErrorKind.MALFORMED_DATA,
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
        return error_page(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorKind.INTERNAL,
        )
