"""AsyncPG-based role repository implementation.

Concrete implementation of RoleRepository and UserRoleRepository protocols.
Every statement binds the tenant id; nothing here reads across tenants.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

import asyncpg

from ..entities import Role, UserRole
from ...database.services.database_service import DatabaseService
from ...database.utils import queries
from ...database.utils.error_handling import database_error_handler

logger = logging.getLogger(__name__)


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_role_from_row(self, row: asyncpg.Record) -> Role:
        """Build Role entity from database row."""
        return Role(
            id=row['id'],
            name=row['name'],
            tenant_id=row['tenant_id'],
            parent_role_id=row['parent_role_id'],
        )

    @database_error_handler("load role index")
    async def list_for_tenant(self, tenant_id: str) -> List[Role]:
        async with self.database.get_connection() as conn:
            rows = await conn.fetch(queries.ROLES_BY_TENANT, tenant_id)
        return [self._build_role_from_row(row) for row in rows]

    @database_error_handler("create role")
    async def create(self, name: str, tenant_id: str, parent_role_id: Optional[int] = None) -> Role:
        async with self.database.get_connection() as conn:
            row = await conn.fetchrow(queries.ROLE_INSERT, name, parent_role_id, tenant_id)
        role = self._build_role_from_row(row)
        logger.info(f"Created role {role.name} ({role.id}) in tenant {tenant_id}")
        return role

    @database_error_handler("set role parent")
    async def set_parent(
        self,
        role_id: int,
        parent_role_id: Optional[int],
        tenant_id: str
    ) -> Optional[Role]:
        async with self.database.get_connection() as conn:
            row = await conn.fetchrow(queries.ROLE_SET_PARENT, role_id, parent_role_id, tenant_id)
        return self._build_role_from_row(row) if row else None


class AsyncPGUserRoleRepository:
    """AsyncPG implementation of UserRoleRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_user_role_from_row(self, row: asyncpg.Record) -> UserRole:
        """Build UserRole entity from database row."""
        return UserRole(
            id=row['id'],
            user_id=row['user_id'],
            role_id=row['role_id'],
            tenant_id=row['tenant_id'],
            org_unit_id=row['org_unit_id'],
            valid_from=row['valid_from'],
            valid_to=row['valid_to'],
        )

    @database_error_handler("load user role assignments")
    async def list_for_user(
        self,
        user_id: str,
        tenant_id: str,
        org_unit_ids: Optional[Sequence[int]] = None
    ) -> List[UserRole]:
        async with self.database.get_connection() as conn:
            if org_unit_ids is None:
                rows = await conn.fetch(queries.USER_ROLES_BY_USER, user_id, tenant_id)
            else:
                rows = await conn.fetch(
                    queries.USER_ROLES_BY_USER_AND_ORG_UNITS,
                    user_id,
                    tenant_id,
                    list(org_unit_ids),
                )
        return [self._build_user_role_from_row(row) for row in rows]

    @database_error_handler("assign role")
    async def assign(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None,
        valid_from: Optional[datetime] = None,
        valid_to: Optional[datetime] = None
    ) -> UserRole:
        async with self.database.get_connection() as conn:
            row = await conn.fetchrow(
                queries.USER_ROLE_INSERT,
                user_id,
                role_id,
                org_unit_id,
                tenant_id,
                valid_from,
                valid_to,
            )
        return self._build_user_role_from_row(row)

    @database_error_handler("revoke role")
    async def revoke(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None
    ) -> bool:
        async with self.database.get_connection() as conn:
            result = await conn.execute(queries.USER_ROLE_DELETE, user_id, role_id, tenant_id, org_unit_id)
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return not result.endswith(" 0")
