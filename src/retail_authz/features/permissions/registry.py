"""
Permission registry with the predefined retail permission catalog.

Requirement declarations are validated against a registry at route
registration time, so a typo in a permission name fails on startup instead of
silently denying every request.
"""

import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Normalized resource:action catalog
RETAIL_PERMISSIONS = [
    # Product
    {'name': 'product:create', 'resource': 'product', 'action': 'create', 'description': 'Create products'},
    {'name': 'product:edit', 'resource': 'product', 'action': 'edit', 'description': 'Edit products'},
    {'name': 'product:delete', 'resource': 'product', 'action': 'delete', 'description': 'Delete products'},
    {'name': 'product:view', 'resource': 'product', 'action': 'view', 'description': 'View products'},

    # Sale
    {'name': 'sale:create', 'resource': 'sale', 'action': 'create', 'description': 'Create sales'},
    {'name': 'sale:refund', 'resource': 'sale', 'action': 'refund', 'description': 'Refund sales'},
    {'name': 'sale:view', 'resource': 'sale', 'action': 'view', 'description': 'View sales'},

    # User
    {'name': 'user:manage', 'resource': 'user', 'action': 'manage', 'description': 'Manage users'},
    {'name': 'user:view', 'resource': 'user', 'action': 'view', 'description': 'View users'},

    # Report
    {'name': 'report:view', 'resource': 'report', 'action': 'view', 'description': 'View reports'},
    {'name': 'report:export', 'resource': 'report', 'action': 'export', 'description': 'Export reports'},

    # Inventory
    {'name': 'inventory:manage', 'resource': 'inventory', 'action': 'manage', 'description': 'Manage inventory'},
    {'name': 'inventory:view', 'resource': 'inventory', 'action': 'view', 'description': 'View inventory'},

    # Support
    {'name': 'support:respond', 'resource': 'support', 'action': 'respond', 'description': 'Respond to support tickets'},

    # Audit
    {'name': 'audit:view', 'resource': 'audit', 'action': 'view', 'description': 'View audit logs'},

    # System
    {'name': 'system:admin', 'resource': 'system', 'action': 'admin', 'description': 'System administration'},
    {'name': 'system:access', 'resource': 'system', 'action': 'access', 'description': 'Basic system access'},
]

# Fine-grained names used by tenants seeded before the resource:action scheme
LEGACY_RETAIL_PERMISSIONS = [
    {'name': 'system_admin', 'resource': 'system', 'action': 'admin', 'description': 'System administration'},
    {'name': 'manage_users', 'resource': 'user', 'action': 'manage', 'description': 'Manage users'},
    {'name': 'manage_roles', 'resource': 'role', 'action': 'manage', 'description': 'Manage roles'},
    {'name': 'view_audit_logs', 'resource': 'audit', 'action': 'view', 'description': 'View audit logs'},
    {'name': 'view_reports', 'resource': 'report', 'action': 'view', 'description': 'View reports'},
    {'name': 'edit_sales', 'resource': 'sales', 'action': 'edit', 'description': 'Edit sales'},
    {'name': 'view_sales', 'resource': 'sales', 'action': 'view', 'description': 'View sales'},
    {'name': 'manage_inventory', 'resource': 'inventory', 'action': 'manage', 'description': 'Manage inventory'},
    {'name': 'view_inventory', 'resource': 'inventory', 'action': 'view', 'description': 'View inventory'},
    {'name': 'support_ticket', 'resource': 'support', 'action': 'respond', 'description': 'Respond to support tickets'},
    {'name': 'basic_access', 'resource': 'system', 'action': 'access', 'description': 'Basic system access'},
]


class PermissionRegistry:
    """Set of permission names a requirement may reference."""

    def __init__(self, permissions: Optional[Iterable[Dict]] = None):
        self._permissions: Dict[str, Dict] = {}
        for permission in permissions or []:
            self.register(permission)

    @classmethod
    def default(cls) -> "PermissionRegistry":
        """Registry seeded with the retail catalog, including legacy names."""
        return cls(RETAIL_PERMISSIONS + LEGACY_RETAIL_PERMISSIONS)

    def register(self, permission) -> None:
        """Register a permission given as a dict, a Permission or a bare name."""
        if isinstance(permission, str):
            permission = {'name': permission}
        elif not isinstance(permission, dict):
            permission = {
                'name': permission.name,
                'resource': getattr(permission, 'resource', None),
                'action': getattr(permission, 'action', None),
                'description': getattr(permission, 'description', None),
            }
        name = str(permission['name']).strip().lower()
        if not name:
            raise ValueError("Permission name cannot be empty")
        self._permissions[name] = dict(permission, name=name)

    def __contains__(self, name: str) -> bool:
        return str(name).strip().lower() in self._permissions

    def __len__(self) -> int:
        return len(self._permissions)

    def unknown(self, names: Iterable[str]) -> List[str]:
        """Names not present in the registry, in input order."""
        return [name for name in names if name not in self]

    def names(self) -> List[str]:
        return sorted(self._permissions)

    def by_resource(self, resource: str) -> List[str]:
        resource = resource.strip().lower()
        return sorted(
            name for name, item in self._permissions.items()
            if (item.get('resource') or '').lower() == resource
        )
