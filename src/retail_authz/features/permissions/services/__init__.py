"""Permission services."""

from .catalog_service import PermissionCatalogService

__all__ = ["PermissionCatalogService"]
