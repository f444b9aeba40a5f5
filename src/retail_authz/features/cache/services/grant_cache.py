"""Short-lived cache for role indexes and aggregated grants.

Entries are namespaced per tenant so a whole tenant can be invalidated after an
administrative write. Grants that came from an elevated-role shortcut are kept
for the shortest TTL. A failing backend is logged and treated as a miss.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from ..entities.protocols import CacheBackend
from ...roles.entities.role import Role
from ....config.constants import CacheKeys, CacheTTL
from ....core.exceptions import CacheError

logger = logging.getLogger(__name__)


class GrantCache:
    """Tenant-namespaced cache in front of the role and permission stores."""

    def __init__(
        self,
        backend: Optional[CacheBackend] = None,
        role_index_ttl: int = CacheTTL.ROLE_INDEX,
        grants_ttl: int = CacheTTL.GRANTS,
        shortcut_ttl: int = CacheTTL.SHORTCUT_GRANTS,
    ):
        self._backend = backend
        self.role_index_ttl = role_index_ttl
        self.grants_ttl = grants_ttl
        self.shortcut_ttl = min(shortcut_ttl, grants_ttl)

    @classmethod
    def from_settings(cls, settings, backend: Optional[CacheBackend]) -> "GrantCache":
        return cls(
            backend=backend,
            role_index_ttl=settings.role_index_ttl,
            grants_ttl=settings.grants_ttl,
            shortcut_ttl=settings.shortcut_ttl,
        )

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    @staticmethod
    def role_index_key(tenant_id: str) -> str:
        return CacheKeys.ROLE_INDEX.format(tenant_id=tenant_id)

    @staticmethod
    def grants_key(tenant_id: str, user_id: str, org_unit_id: Optional[int]) -> str:
        return CacheKeys.USER_GRANTS.format(
            tenant_id=tenant_id,
            user_id=user_id,
            org_unit_id="*" if org_unit_id is None else org_unit_id,
        )

    async def get_role_index(self, tenant_id: str) -> Optional[Dict[int, Role]]:
        """Get the cached id -> Role index of a tenant."""
        payload = await self._get(self.role_index_key(tenant_id))
        if payload is None:
            return None
        roles = (Role.from_dict(item) for item in payload)
        return {role.id: role for role in roles if role.tenant_id == tenant_id}

    async def set_role_index(self, tenant_id: str, roles: Iterable[Role]) -> None:
        payload = [role.to_dict() for role in roles]
        await self._set(self.role_index_key(tenant_id), payload, self.role_index_ttl)

    async def get_grants(
        self,
        tenant_id: str,
        user_id: str,
        org_unit_id: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a cached grant payload for a user in a tenant and org unit."""
        return await self._get(self.grants_key(tenant_id, user_id, org_unit_id))

    async def set_grants(
        self,
        tenant_id: str,
        user_id: str,
        org_unit_id: Optional[int],
        payload: Dict[str, Any],
        shortcut: bool = False,
    ) -> None:
        ttl = self.shortcut_ttl if shortcut else self.grants_ttl
        await self._set(self.grants_key(tenant_id, user_id, org_unit_id), payload, ttl)

    async def invalidate_tenant(self, tenant_id: str) -> int:
        """Drop everything cached for a tenant."""
        if self._backend is None:
            return 0
        prefix = CacheKeys.TENANT_PREFIX.format(tenant_id=tenant_id)
        try:
            removed = await self._backend.delete_prefix(prefix)
        except CacheError as e:
            logger.error(f"Failed to invalidate grant cache for tenant {tenant_id}: {e}")
            return 0
        logger.debug(f"Invalidated {removed} grant cache entries for tenant {tenant_id}")
        return removed

    async def _get(self, key: str) -> Optional[Any]:
        if self._backend is None:
            return None
        try:
            return await self._backend.get(key)
        except CacheError as e:
            logger.warning(f"Grant cache read failed, falling through: {e}")
            return None

    async def _set(self, key: str, value: Any, ttl: int) -> None:
        if self._backend is None or ttl <= 0:
            return
        try:
            await self._backend.set(key, value, ttl)
        except CacheError as e:
            logger.warning(f"Grant cache write failed: {e}")
