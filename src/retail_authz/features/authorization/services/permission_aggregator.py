"""
Permission Aggregator.

Maps a role closure to the effective permission names of a principal within
one tenant. A closure holding a shortcut role (``owner``/``admin`` by default)
skips the permission query; the caller treats it as permitted in the tenant.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from .role_closure import RoleClosure
from ...permissions.entities import PermissionRepository
from ....config.constants import DEFAULT_SHORTCUT_ROLES
from ....core.exceptions import InternalAuthzError


@dataclass(frozen=True)
class AggregatedPermissions:
    """Effective permission names of a closure, or the shortcut role that replaced them."""

    tenant_id: str
    permissions: FrozenSet[str] = frozenset()
    shortcut_role: Optional[str] = None

    @property
    def is_shortcut(self) -> bool:
        return self.shortcut_role is not None


class PermissionAggregator:
    """Aggregates permissions granted to every role of a closure."""

    def __init__(
        self,
        permission_repository: PermissionRepository,
        shortcut_roles: Iterable[str] = DEFAULT_SHORTCUT_ROLES,
    ):
        self.permission_repository = permission_repository
        self.shortcut_roles = tuple(r.strip().lower() for r in shortcut_roles)

    def find_shortcut(self, closure: RoleClosure) -> Optional[str]:
        """First shortcut role present in the closure, in configured order."""
        names = closure.role_names
        for role_name in self.shortcut_roles:
            if role_name in names:
                return role_name
        return None

    async def aggregate(self, closure: RoleClosure, tenant_id: str) -> AggregatedPermissions:
        if closure.tenant_id != tenant_id:
            raise InternalAuthzError(
                "Role closure was computed for another tenant",
                details={"closure_tenant_id": closure.tenant_id, "tenant_id": tenant_id},
            )

        shortcut = self.find_shortcut(closure)
        if shortcut is not None:
            return AggregatedPermissions(tenant_id=tenant_id, shortcut_role=shortcut)

        role_ids = [role.id for role in closure.roles.values() if role.tenant_id == tenant_id]
        if not role_ids:
            return AggregatedPermissions(tenant_id=tenant_id)

        names = await self.permission_repository.names_for_roles(role_ids, tenant_id)
        return AggregatedPermissions(
            tenant_id=tenant_id,
            permissions=frozenset(n.strip().lower() for n in names),
        )
