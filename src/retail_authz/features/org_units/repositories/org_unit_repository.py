"""AsyncPG-based org unit repository implementation."""

import logging
from typing import List

import asyncpg

from ..entities import OrgUnit, UserOrgUnit
from ...database.services.database_service import DatabaseService
from ...database.utils import queries
from ...database.utils.error_handling import database_error_handler

logger = logging.getLogger(__name__)


class AsyncPGOrgUnitRepository:
    """AsyncPG implementation of OrgUnitRepository protocol."""

    def __init__(self, database: DatabaseService):
        self.database = database

    def _build_org_unit_from_row(self, row: asyncpg.Record) -> OrgUnit:
        return OrgUnit(
            id=row['id'],
            name=row['name'],
            tenant_id=row['tenant_id'],
            parent_org_unit_id=row['parent_org_unit_id'],
        )

    @database_error_handler("load org units")
    async def list_for_tenant(self, tenant_id: str) -> List[OrgUnit]:
        async with self.database.get_connection() as conn:
            rows = await conn.fetch(queries.ORG_UNITS_BY_TENANT, tenant_id)
        return [self._build_org_unit_from_row(row) for row in rows]

    @database_error_handler("load org unit memberships")
    async def list_memberships(self, user_id: str, tenant_id: str) -> List[UserOrgUnit]:
        async with self.database.get_connection() as conn:
            rows = await conn.fetch(queries.USER_ORG_UNITS_BY_USER, user_id, tenant_id)
        return [
            UserOrgUnit(
                user_id=row['user_id'],
                org_unit_id=row['org_unit_id'],
                tenant_id=row['tenant_id'],
            )
            for row in rows
        ]
