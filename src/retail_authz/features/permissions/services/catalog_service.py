"""Administrative writes to the permission catalog.

Grants change effective permissions of every role below the granted role, so
each write drops the tenant's cached grants.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from ..entities import Permission, PermissionRepository
from ..registry import PermissionRegistry

if TYPE_CHECKING:
    from ...cache.services.grant_cache import GrantCache

logger = logging.getLogger(__name__)


class PermissionCatalogService:
    """Tenant-scoped permission catalog management."""

    def __init__(
        self,
        repository: PermissionRepository,
        grant_cache: Optional["GrantCache"] = None,
        registry: Optional[PermissionRegistry] = None,
    ):
        self.repository = repository
        self.grant_cache = grant_cache
        self.registry = registry

    async def list_permissions(self, tenant_id: str) -> List[Permission]:
        return await self.repository.list_for_tenant(tenant_id)

    async def create_permission(
        self,
        name: str,
        tenant_id: str,
        resource: Optional[str] = None,
        action: Optional[str] = None,
        description: Optional[str] = None
    ) -> Permission:
        permission = await self.repository.create(
            name, tenant_id, resource=resource, action=action, description=description
        )
        if self.registry is not None:
            self.registry.register(permission)
        return permission

    async def grant(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        granted = await self.repository.grant(role_id, permission_id, tenant_id)
        if granted:
            logger.info(f"Granted permission {permission_id} to role {role_id} in tenant {tenant_id}")
            await self._invalidate(tenant_id)
        return granted

    async def revoke(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        revoked = await self.repository.revoke(role_id, permission_id, tenant_id)
        if revoked:
            logger.info(f"Revoked permission {permission_id} from role {role_id} in tenant {tenant_id}")
            await self._invalidate(tenant_id)
        return revoked

    async def _invalidate(self, tenant_id: str) -> None:
        if self.grant_cache is not None:
            await self.grant_cache.invalidate_tenant(tenant_id)
