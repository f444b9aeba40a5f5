"""Org unit entities.

Org units form a per-tenant forest (company > region > store, for example)
independent of the role hierarchy. They scope where a role assignment applies.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OrgUnit:
    """Tenant-scoped organizational unit."""

    id: int
    name: str
    tenant_id: str
    parent_org_unit_id: Optional[int] = None

    def __post_init__(self):
        if not self.name or not str(self.name).strip():
            raise ValueError("Org unit name cannot be empty")
        object.__setattr__(self, 'tenant_id', str(self.tenant_id))

    @property
    def is_root(self) -> bool:
        return self.parent_org_unit_id is None


@dataclass(frozen=True)
class UserOrgUnit:
    """Direct membership of a user in an org unit, independent of role."""

    user_id: str
    org_unit_id: int
    tenant_id: str

    def __post_init__(self):
        object.__setattr__(self, 'user_id', str(self.user_id))
        object.__setattr__(self, 'tenant_id', str(self.tenant_id))
