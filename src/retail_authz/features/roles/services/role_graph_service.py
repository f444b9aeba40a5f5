"""Role graph service.

Reads the tenant role index (through the grant cache when one is configured)
and guards administrative writes so the parent relation stays a forest.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from ..entities import Role, RoleRepository, UserRole, UserRoleRepository
from ....core.exceptions import RoleCycleError, RoleHierarchyError

if TYPE_CHECKING:
    from ...cache.services.grant_cache import GrantCache

logger = logging.getLogger(__name__)


class RoleGraphService:
    """Tenant-scoped access to roles and role assignments."""

    def __init__(
        self,
        role_repository: RoleRepository,
        user_role_repository: UserRoleRepository,
        grant_cache: Optional["GrantCache"] = None,
    ):
        self.role_repository = role_repository
        self.user_role_repository = user_role_repository
        self.grant_cache = grant_cache

    async def role_index(self, tenant_id: str, use_cache: bool = True) -> Dict[int, Role]:
        """Get the id -> Role index of a tenant."""
        if use_cache and self.grant_cache is not None:
            cached = await self.grant_cache.get_role_index(tenant_id)
            if cached is not None:
                return cached

        roles = await self.role_repository.list_for_tenant(tenant_id)
        index = {role.id: role for role in roles if role.tenant_id == tenant_id}

        if use_cache and self.grant_cache is not None:
            await self.grant_cache.set_role_index(tenant_id, index.values())
        return index

    async def assignments_for(
        self,
        user_id: str,
        tenant_id: str,
        org_unit_ids: Optional[Sequence[int]] = None
    ) -> List[UserRole]:
        """Get a user's role assignments, optionally limited to org units."""
        assignments = await self.user_role_repository.list_for_user(
            user_id, tenant_id, org_unit_ids=org_unit_ids
        )
        return [a for a in assignments if a.tenant_id == tenant_id]

    async def create_role(
        self,
        name: str,
        tenant_id: str,
        parent_role_id: Optional[int] = None
    ) -> Role:
        if parent_role_id is not None:
            index = await self.role_index(tenant_id, use_cache=False)
            if parent_role_id not in index:
                raise RoleHierarchyError(
                    f"Parent role {parent_role_id} does not exist in tenant",
                    details={"parent_role_id": parent_role_id},
                )
        role = await self.role_repository.create(name, tenant_id, parent_role_id)
        await self._invalidate(tenant_id)
        return role

    async def set_parent(
        self,
        role_id: int,
        parent_role_id: Optional[int],
        tenant_id: str
    ) -> Role:
        """Re-parent a role, refusing changes that would break the forest.

        Raises:
            RoleHierarchyError: unknown role, parent outside the tenant, or a
                parent that is the role itself or one of its descendants.
        """
        index = await self.role_index(tenant_id, use_cache=False)
        if role_id not in index:
            raise RoleHierarchyError(
                f"Role {role_id} does not exist in tenant",
                details={"role_id": role_id},
            )

        if parent_role_id is not None:
            if parent_role_id not in index:
                raise RoleHierarchyError(
                    f"Parent role {parent_role_id} does not exist in tenant",
                    details={"role_id": role_id, "parent_role_id": parent_role_id},
                )
            if role_id in self._chain(parent_role_id, index):
                raise RoleHierarchyError(
                    f"Setting parent {parent_role_id} on role {role_id} would create a cycle",
                    details={"role_id": role_id, "parent_role_id": parent_role_id},
                )

        updated = await self.role_repository.set_parent(role_id, parent_role_id, tenant_id)
        if updated is None:
            raise RoleHierarchyError(
                f"Role {role_id} does not exist in tenant",
                details={"role_id": role_id},
            )
        logger.info(f"Role {role_id} parent set to {parent_role_id} in tenant {tenant_id}")
        await self._invalidate(tenant_id)
        return updated

    async def assign_role(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None,
        valid_from: Optional[datetime] = None,
        valid_to: Optional[datetime] = None
    ) -> UserRole:
        index = await self.role_index(tenant_id, use_cache=False)
        if role_id not in index:
            raise RoleHierarchyError(
                f"Role {role_id} does not exist in tenant",
                details={"role_id": role_id},
            )
        assignment = await self.user_role_repository.assign(
            user_id,
            role_id,
            tenant_id,
            org_unit_id=org_unit_id,
            valid_from=valid_from,
            valid_to=valid_to,
        )
        await self._invalidate(tenant_id)
        return assignment

    async def revoke_role(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None
    ) -> bool:
        removed = await self.user_role_repository.revoke(
            user_id, role_id, tenant_id, org_unit_id=org_unit_id
        )
        if removed:
            await self._invalidate(tenant_id)
        return removed

    @staticmethod
    def _chain(start_id: int, index: Dict[int, Role]) -> List[int]:
        """Ids from ``start_id`` up to its root, guarding against stored cycles."""
        chain: List[int] = []
        seen = set()
        current = start_id
        while current is not None and current in index:
            if current in seen:
                raise RoleCycleError(
                    f"Stored role hierarchy contains a cycle at role {current}",
                    details={"role_id": current},
                )
            seen.add(current)
            chain.append(current)
            current = index[current].parent_role_id
        return chain

    async def _invalidate(self, tenant_id: str) -> None:
        if self.grant_cache is not None:
            await self.grant_cache.invalidate_tenant(tenant_id)
