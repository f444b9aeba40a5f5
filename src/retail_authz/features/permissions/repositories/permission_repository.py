"""AsyncPG-based permission catalog repository."""

import logging
from typing import List, Optional, Sequence, Set

import asyncpg

from ..entities import Permission
from ...database.services.database_service import DatabaseService
from ...database.utils import queries
from ...database.utils.error_handling import database_error_handler

logger = logging.getLogger(__name__)


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_permission_from_row(self, row: asyncpg.Record) -> Permission:
        return Permission(
            id=row['id'],
            name=row['name'],
            tenant_id=row['tenant_id'],
            resource=row['resource'],
            action=row['action'],
            description=row['description'],
        )

    @database_error_handler("load permission catalog")
    async def list_for_tenant(self, tenant_id: str) -> List[Permission]:
        async with self.database.get_connection() as conn:
            rows = await conn.fetch(queries.PERMISSIONS_BY_TENANT, tenant_id)
        return [self._build_permission_from_row(row) for row in rows]

    @database_error_handler("aggregate role permissions")
    async def names_for_roles(self, role_ids: Sequence[int], tenant_id: str) -> Set[str]:
        if not role_ids:
            return set()
        async with self.database.get_connection() as conn:
            rows = await conn.fetch(queries.PERMISSION_NAMES_FOR_ROLES, tenant_id, list(role_ids))
        return {row['name'].strip().lower() for row in rows}

    @database_error_handler("create permission")
    async def create(
        self,
        name: str,
        tenant_id: str,
        resource: Optional[str] = None,
        action: Optional[str] = None,
        description: Optional[str] = None
    ) -> Permission:
        async with self.database.get_connection() as conn:
            row = await conn.fetchrow(
                queries.PERMISSION_INSERT, name, resource, action, description, tenant_id
            )
        permission = self._build_permission_from_row(row)
        logger.info(f"Created permission {permission.name} in tenant {tenant_id}")
        return permission

    @database_error_handler("grant permission")
    async def grant(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        async with self.database.get_connection() as conn:
            result = await conn.execute(queries.ROLE_PERMISSION_INSERT, role_id, permission_id, tenant_id)
        return not result.endswith(" 0")

    @database_error_handler("revoke permission")
    async def revoke(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        async with self.database.get_connection() as conn:
            result = await conn.execute(queries.ROLE_PERMISSION_DELETE, role_id, permission_id, tenant_id)
        return not result.endswith(" 0")
