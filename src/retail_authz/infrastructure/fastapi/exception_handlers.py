"""
Exception handlers for FastAPI applications using retail-authz.

Expected outcomes map to their HTTP status. Server-side failures are forwarded
to the error reporter with a sanitised request context, and the client only
ever sees a generic message for them.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ...core.exceptions import (
    InternalAuthzError,
    RetailAuthzError,
    UnauthenticatedError,
    create_error_response,
    get_http_status_code,
)
from ...utils.sanitization import sanitize_context
from ..error_reporting import ErrorReporter

logger = logging.getLogger(__name__)


def request_error_context(request: Request) -> Dict[str, Any]:
    """Request context for error reports. Sanitised again by the reporter."""
    principal = getattr(request.state, "principal", None)
    return {
        "method": request.method,
        "path": request.url.path,
        "tenant_id": getattr(request.state, "tenant_id", None),
        "user_id": getattr(principal, "id", None),
        "headers": sanitize_context(dict(request.headers)),
    }


def register_exception_handlers(app: FastAPI, reporter: Optional[ErrorReporter] = None) -> None:
    """
    Register exception handlers for a FastAPI application.

    Args:
        app: FastAPI application instance
        reporter: Sink for server-side failures
    """

    def _report(request: Request, exc: Exception) -> None:
        if reporter is None:
            return
        if isinstance(exc, InternalAuthzError):
            if exc.reported:
                return
            exc.reported = True
        reporter.report(exc, request_error_context(request))

    @app.exception_handler(RetailAuthzError)
    async def retail_authz_exception_handler(request: Request, exc: RetailAuthzError):
        """Handle authorization exceptions."""
        status_code = get_http_status_code(exc)
        headers = None
        if status_code >= 500:
            logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
            _report(request, exc)
        elif isinstance(exc, UnauthenticatedError):
            headers = {"WWW-Authenticate": "Bearer"}

        return JSONResponse(
            status_code=status_code,
            content=create_error_response(exc),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        _report(request, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "InternalServerError",
                    "message": "An unexpected error occurred",
                    "details": {},
                    "type": "InternalServerError",
                }
            },
        )
