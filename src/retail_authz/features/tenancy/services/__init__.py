"""Tenancy services."""

from .owner_override import OwnerOverride
from .tenant_resolver import TenantResolver, extract_subdomain

__all__ = ["OwnerOverride", "TenantResolver", "extract_subdomain"]
