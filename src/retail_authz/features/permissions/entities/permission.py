"""Permission domain entities for retail-authz permissions feature."""

from dataclasses import dataclass
from typing import Optional, Tuple


def split_permission_name(name: str) -> Tuple[Optional[str], Optional[str]]:
    """Split a ``resource:action`` name. Names without a colon have no parts."""
    if ":" not in name:
        return None, None
    resource, action = name.split(":", 1)
    return resource or None, action or None


@dataclass(frozen=True)
class Permission:
    """Tenant-scoped named permission, typically ``resource:action``."""

    id: int
    name: str
    tenant_id: str
    resource: Optional[str] = None
    action: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if not self.name or not str(self.name).strip():
            raise ValueError("Permission name cannot be empty")
        object.__setattr__(self, 'tenant_id', str(self.tenant_id))
        if self.resource is None and self.action is None:
            resource, action = split_permission_name(self.name)
            object.__setattr__(self, 'resource', resource)
            object.__setattr__(self, 'action', action)

    @property
    def normalized_name(self) -> str:
        return self.name.strip().lower()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RolePermission:
    """Direct grant of a permission to a role. Inheritance is resolved at query time."""

    role_id: int
    permission_id: int
    tenant_id: str
