"""Tenancy entities."""

from .tenant_context import TenantContext, TenantRequest

__all__ = ["TenantContext", "TenantRequest"]
