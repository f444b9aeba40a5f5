"""Tenant context middleware for multi-tenant FastAPI applications.

Resolves the tenant before any route code runs and stores the read-only
``TenantContext`` on ``request.state``. Resolution failures are answered here,
before any role lookup, and recorded as a deny (or error) audit event. The authentication middleware must run first so the
principal's tenant claim is visible.
"""

import logging
from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ...config.constants import AuditOutcome, DEFAULT_EXEMPT_PATHS
from ...core.exceptions import (
    InternalAuthzError,
    RetailAuthzError,
    create_error_response,
    get_http_status_code,
)
from ...features.audit import AuditEmitter, AuditEvent
from ...features.tenancy import TenantRequest, TenantResolver
from ..error_reporting import ErrorReporter
from .request_state import get_principal

logger = logging.getLogger(__name__)


def build_tenant_request(request: Request) -> TenantRequest:
    """Snapshot the parts of a Starlette request used for tenant resolution."""
    return TenantRequest(
        headers=dict(request.headers),
        host=request.headers.get("host") or request.url.hostname,
        path=request.url.path,
        method=request.method,
        client_ip=request.client.host if request.client else None,
        principal=get_principal(request),
    )


class TenantContextMiddleware(BaseHTTPMiddleware):
    """FastAPI middleware for tenant context resolution and isolation."""

    def __init__(
        self,
        app,
        resolver: TenantResolver,
        exempt_paths: Optional[Iterable[str]] = None,
        error_reporter: Optional[ErrorReporter] = None,
        audit_emitter: Optional[AuditEmitter] = None,
    ):
        super().__init__(app)
        self.resolver = resolver
        self.exempt_paths = tuple(exempt_paths) if exempt_paths is not None else DEFAULT_EXEMPT_PATHS
        self.error_reporter = error_reporter
        self.audit_emitter = audit_emitter

    def is_exempt(self, path: str) -> bool:
        return any(path == p or path.startswith(p.rstrip("/") + "/") for p in self.exempt_paths)

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process tenant context for incoming requests."""
        if self.is_exempt(request.url.path):
            return await call_next(request)

        try:
            tenant_context = await self.resolver.resolve(build_tenant_request(request))
        except RetailAuthzError as e:
            status_code = get_http_status_code(e)
            if isinstance(e, InternalAuthzError) and self.error_reporter is not None:
                self.error_reporter.report(e, {"method": request.method, "path": request.url.path})
                e.reported = True
            self._audit_rejection(request, e)
            logger.debug(f"Tenant resolution rejected {request.method} {request.url.path}: {e.error_code}")
            return JSONResponse(status_code=status_code, content=create_error_response(e))

        request.state.tenant_context = tenant_context
        request.state.tenant_id = tenant_context.tenant_id
        return await call_next(request)

    def _audit_rejection(self, request: Request, error: RetailAuthzError) -> None:
        if self.audit_emitter is None:
            return
        principal = get_principal(request)
        outcome = AuditOutcome.ERROR if isinstance(error, InternalAuthzError) else AuditOutcome.DENY
        self.audit_emitter.emit(AuditEvent(
            action=f"{request.method} {request.url.path}",
            outcome=outcome,
            user_id=getattr(principal, "id", None),
            reason=error.error_code,
            ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            context={"method": request.method, "path": request.url.path},
        ))
