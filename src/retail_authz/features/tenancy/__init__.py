"""Tenant Context Resolver: determines the tenant of each request, failing closed."""

from .entities import TenantContext, TenantRequest
from .services import OwnerOverride, TenantResolver, extract_subdomain

__all__ = [
    "TenantContext",
    "TenantRequest",
    "OwnerOverride",
    "TenantResolver",
    "extract_subdomain",
]
