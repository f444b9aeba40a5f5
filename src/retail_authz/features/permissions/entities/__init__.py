"""Permission entities and protocols."""

from .permission import Permission, RolePermission, split_permission_name
from .protocols import PermissionRepository

__all__ = ["Permission", "RolePermission", "PermissionRepository", "split_permission_name"]
