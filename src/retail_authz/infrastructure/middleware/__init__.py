"""Starlette middleware for the authorization seam."""

from .request_state import get_org_unit_id, get_principal, get_tenant_context
from .tenant_middleware import TenantContextMiddleware, build_tenant_request

__all__ = [
    "TenantContextMiddleware",
    "build_tenant_request",
    "get_org_unit_id",
    "get_principal",
    "get_tenant_context",
]
