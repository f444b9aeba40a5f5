"""In-memory stores implementing the repository protocols for tests."""

import itertools
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from retail_authz.core.exceptions import DatabaseError
from retail_authz.features.org_units.entities import OrgUnit, UserOrgUnit
from retail_authz.features.permissions.entities import Permission
from retail_authz.features.roles.entities import Role, UserRole


class InMemoryAuthzStore:
    """Shared tables behind the fake repositories.

    Setting ``failing`` makes every repository call raise ``DatabaseError``,
    the way the asyncpg repositories do when the database is unreachable.
    """

    def __init__(self):
        self.roles: Dict[int, Role] = {}
        self.user_roles: List[UserRole] = []
        self.permissions: Dict[int, Permission] = {}
        self.role_permissions: Set[Tuple[int, int, str]] = set()
        self.org_units: Dict[int, OrgUnit] = {}
        self.memberships: List[UserOrgUnit] = []
        self.failing = False
        self.calls: Counter = Counter()
        self._ids = itertools.count(1)

    def check(self, operation: str) -> None:
        self.calls[operation] += 1
        if self.failing:
            raise DatabaseError(
                f"Failed to {operation}",
                details={"operation": operation, "cause": "ConnectionRefusedError"},
            )

    # Seeding helpers

    def add_role(self, name: str, tenant_id: str, parent: Optional[Role] = None) -> Role:
        role = Role(
            id=next(self._ids),
            name=name,
            tenant_id=tenant_id,
            parent_role_id=parent.id if parent else None,
        )
        self.roles[role.id] = role
        return role

    def force_parent(self, role: Role, parent_role_id: Optional[int]) -> Role:
        """Write a parent link without any hierarchy checks."""
        updated = replace(self.roles[role.id], parent_role_id=parent_role_id)
        self.roles[role.id] = updated
        return updated

    def add_permission(self, name: str, tenant_id: str) -> Permission:
        for permission in self.permissions.values():
            if permission.tenant_id == tenant_id and permission.name == name:
                return permission
        permission = Permission(id=next(self._ids), name=name, tenant_id=tenant_id)
        self.permissions[permission.id] = permission
        return permission

    def grant(self, role: Role, permission_name: str) -> Permission:
        permission = self.add_permission(permission_name, role.tenant_id)
        self.role_permissions.add((role.id, permission.id, role.tenant_id))
        return permission

    def assign(
        self,
        user_id: str,
        role: Role,
        org_unit_id: Optional[int] = None,
        valid_from: Optional[datetime] = None,
        valid_to: Optional[datetime] = None,
    ) -> UserRole:
        assignment = UserRole(
            id=next(self._ids),
            user_id=user_id,
            role_id=role.id,
            tenant_id=role.tenant_id,
            org_unit_id=org_unit_id,
            valid_from=valid_from,
            valid_to=valid_to,
        )
        self.user_roles.append(assignment)
        return assignment

    def add_org_unit(self, name: str, tenant_id: str, parent: Optional[OrgUnit] = None) -> OrgUnit:
        unit = OrgUnit(
            id=next(self._ids),
            name=name,
            tenant_id=tenant_id,
            parent_org_unit_id=parent.id if parent else None,
        )
        self.org_units[unit.id] = unit
        return unit

    def add_membership(self, user_id: str, unit: OrgUnit) -> UserOrgUnit:
        membership = UserOrgUnit(user_id=user_id, org_unit_id=unit.id, tenant_id=unit.tenant_id)
        self.memberships.append(membership)
        return membership


class FakeRoleRepository:
    def __init__(self, store: InMemoryAuthzStore):
        self.store = store

    async def list_for_tenant(self, tenant_id: str) -> List[Role]:
        self.store.check("load role index")
        return [r for r in self.store.roles.values() if r.tenant_id == tenant_id]

    async def create(self, name: str, tenant_id: str, parent_role_id: Optional[int] = None) -> Role:
        self.store.check("create role")
        parent = self.store.roles.get(parent_role_id) if parent_role_id is not None else None
        return self.store.add_role(name, tenant_id, parent)

    async def set_parent(self, role_id: int, parent_role_id: Optional[int], tenant_id: str) -> Optional[Role]:
        self.store.check("set role parent")
        role = self.store.roles.get(role_id)
        if role is None or role.tenant_id != tenant_id:
            return None
        return self.store.force_parent(role, parent_role_id)


class FakeUserRoleRepository:
    def __init__(self, store: InMemoryAuthzStore):
        self.store = store

    async def list_for_user(
        self,
        user_id: str,
        tenant_id: str,
        org_unit_ids: Optional[Sequence[int]] = None
    ) -> List[UserRole]:
        self.store.check("load user role assignments")
        return [
            a for a in self.store.user_roles
            if a.user_id == user_id
            and a.tenant_id == tenant_id
            and (org_unit_ids is None or a.org_unit_id in set(org_unit_ids))
        ]

    async def assign(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None,
        valid_from: Optional[datetime] = None,
        valid_to: Optional[datetime] = None
    ) -> UserRole:
        self.store.check("assign role")
        return self.store.assign(
            user_id,
            self.store.roles[role_id],
            org_unit_id=org_unit_id,
            valid_from=valid_from,
            valid_to=valid_to,
        )

    async def revoke(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None
    ) -> bool:
        self.store.check("revoke role")
        before = len(self.store.user_roles)
        self.store.user_roles = [
            a for a in self.store.user_roles
            if not (
                a.user_id == user_id
                and a.role_id == role_id
                and a.tenant_id == tenant_id
                and a.org_unit_id == org_unit_id
            )
        ]
        return len(self.store.user_roles) < before


class FakePermissionRepository:
    def __init__(self, store: InMemoryAuthzStore):
        self.store = store

    async def list_for_tenant(self, tenant_id: str) -> List[Permission]:
        self.store.check("load permission catalog")
        return sorted(
            (p for p in self.store.permissions.values() if p.tenant_id == tenant_id),
            key=lambda p: p.name,
        )

    async def names_for_roles(self, role_ids: Sequence[int], tenant_id: str) -> Set[str]:
        self.store.check("aggregate role permissions")
        wanted = set(role_ids)
        return {
            self.store.permissions[permission_id].name.lower()
            for role_id, permission_id, grant_tenant in self.store.role_permissions
            if role_id in wanted and grant_tenant == tenant_id
        }

    async def create(
        self,
        name: str,
        tenant_id: str,
        resource: Optional[str] = None,
        action: Optional[str] = None,
        description: Optional[str] = None
    ) -> Permission:
        self.store.check("create permission")
        return self.store.add_permission(name, tenant_id)

    async def grant(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        self.store.check("grant permission")
        role = self.store.roles.get(role_id)
        permission = self.store.permissions.get(permission_id)
        if role is None or permission is None:
            return False
        if role.tenant_id != tenant_id or permission.tenant_id != tenant_id:
            return False
        key = (role_id, permission_id, tenant_id)
        if key in self.store.role_permissions:
            return False
        self.store.role_permissions.add(key)
        return True

    async def revoke(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        self.store.check("revoke permission")
        key = (role_id, permission_id, tenant_id)
        if key not in self.store.role_permissions:
            return False
        self.store.role_permissions.discard(key)
        return True


class FakeOrgUnitRepository:
    def __init__(self, store: InMemoryAuthzStore):
        self.store = store

    async def list_for_tenant(self, tenant_id: str) -> List[OrgUnit]:
        self.store.check("load org units")
        return [u for u in self.store.org_units.values() if u.tenant_id == tenant_id]

    async def list_memberships(self, user_id: str, tenant_id: str) -> List[UserOrgUnit]:
        self.store.check("load org unit memberships")
        return [
            m for m in self.store.memberships
            if m.user_id == user_id and m.tenant_id == tenant_id
        ]


class RecordingAuditSink:
    def __init__(self):
        self.events = []

    async def write(self, event) -> None:
        self.events.append(event)

    def outcomes(self) -> List[str]:
        return [event.outcome.value for event in self.events]


class FailingAuditSink:
    async def write(self, event) -> None:
        raise OSError("audit store unreachable")


class RecordingErrorReporter:
    def __init__(self):
        self.reports: List[Tuple[BaseException, Dict[str, Any]]] = []

    def report(self, error: BaseException, context: Optional[Mapping[str, Any]] = None) -> None:
        self.reports.append((error, dict(context or {})))
