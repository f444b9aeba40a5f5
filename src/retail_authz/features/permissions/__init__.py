"""Permission Catalog: tenant-scoped permissions and direct role grants."""

from .entities import Permission, PermissionRepository, RolePermission, split_permission_name
from .registry import LEGACY_RETAIL_PERMISSIONS, RETAIL_PERMISSIONS, PermissionRegistry
from .repositories import AsyncPGPermissionRepository
from .services import PermissionCatalogService

__all__ = [
    "Permission",
    "PermissionRepository",
    "RolePermission",
    "split_permission_name",
    "LEGACY_RETAIL_PERMISSIONS",
    "RETAIL_PERMISSIONS",
    "PermissionRegistry",
    "AsyncPGPermissionRepository",
    "PermissionCatalogService",
]
