"""Tests for the asyncpg repositories and the database service."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import asyncpg
import pytest

from retail_authz.core.exceptions import ConfigurationError, DatabaseError
from retail_authz.features.database import DatabaseService
from retail_authz.features.database.utils import queries
from retail_authz.features.org_units import AsyncPGOrgUnitRepository
from retail_authz.features.permissions import AsyncPGPermissionRepository
from retail_authz.features.roles import AsyncPGRoleRepository, AsyncPGUserRoleRepository


class TestRoleRepositories:

    @pytest.mark.asyncio
    async def test_list_for_tenant_builds_roles(self, mock_database):
        database, connection = mock_database
        connection.fetch.return_value = [
            {"id": 1, "name": "vp", "parent_role_id": None, "tenant_id": "5"},
            {"id": 2, "name": "director", "parent_role_id": 1, "tenant_id": "5"},
        ]

        roles = await AsyncPGRoleRepository(database).list_for_tenant("5")

        connection.fetch.assert_awaited_once_with(queries.ROLES_BY_TENANT, "5")
        assert [r.name for r in roles] == ["vp", "director"]
        assert roles[1].parent_role_id == 1

    @pytest.mark.asyncio
    async def test_set_parent_missing_role(self, mock_database):
        database, connection = mock_database
        connection.fetchrow.return_value = None

        assert await AsyncPGRoleRepository(database).set_parent(9, 1, "5") is None

    @pytest.mark.asyncio
    async def test_assignments_limited_to_org_units(self, mock_database):
        database, connection = mock_database
        connection.fetch.return_value = [{
            "id": 10,
            "user_id": "u1",
            "role_id": 3,
            "org_unit_id": 4,
            "tenant_id": "5",
            "valid_from": datetime(2024, 1, 1),
            "valid_to": None,
        }]

        assignments = await AsyncPGUserRoleRepository(database).list_for_user("u1", "5", org_unit_ids=[4, 2])

        connection.fetch.assert_awaited_once_with(
            queries.USER_ROLES_BY_USER_AND_ORG_UNITS, "u1", "5", [4, 2]
        )
        assert assignments[0].org_unit_id == 4
        assert assignments[0].is_effective_at(datetime(2024, 6, 1, tzinfo=timezone.utc))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag,expected", [("DELETE 1", True), ("DELETE 0", False)])
    async def test_revoke_reads_command_tag(self, mock_database, tag, expected):
        database, connection = mock_database
        connection.execute.return_value = tag

        assert await AsyncPGUserRoleRepository(database).revoke("u1", 3, "5") is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", [
        OSError("connection refused"),
        asyncio.TimeoutError(),
        asyncpg.InterfaceError("pool is closing"),
    ])
    async def test_driver_failures_become_database_errors(self, mock_database, failure):
        database, connection = mock_database
        connection.fetch.side_effect = failure

        with pytest.raises(DatabaseError) as exc_info:
            await AsyncPGUserRoleRepository(database).list_for_user("u1", "5")

        assert exc_info.value.details["operation"] == "load user role assignments"
        assert exc_info.value.__cause__ is failure


class TestPermissionRepository:

    @pytest.mark.asyncio
    async def test_names_are_lower_cased(self, mock_database):
        database, connection = mock_database
        connection.fetch.return_value = [{"name": "Inventory:View"}, {"name": "report:view"}]

        names = await AsyncPGPermissionRepository(database).names_for_roles([1, 2], "5")

        connection.fetch.assert_awaited_once_with(queries.PERMISSION_NAMES_FOR_ROLES, "5", [1, 2])
        assert names == {"inventory:view", "report:view"}

    @pytest.mark.asyncio
    async def test_grant_without_matching_rows(self, mock_database):
        database, connection = mock_database
        connection.execute.return_value = "INSERT 0 0"

        assert await AsyncPGPermissionRepository(database).grant(1, 2, "5") is False

    @pytest.mark.asyncio
    async def test_create_splits_name(self, mock_database):
        database, connection = mock_database
        connection.fetchrow.return_value = {
            "id": 3,
            "name": "sale:refund",
            "resource": None,
            "action": None,
            "description": None,
            "tenant_id": "5",
        }

        permission = await AsyncPGPermissionRepository(database).create("sale:refund", "5")

        assert (permission.resource, permission.action) == ("sale", "refund")


class TestOrgUnitRepository:

    @pytest.mark.asyncio
    async def test_memberships(self, mock_database):
        database, connection = mock_database
        connection.fetch.return_value = [{"user_id": "u1", "org_unit_id": 4, "tenant_id": "5"}]

        memberships = await AsyncPGOrgUnitRepository(database).list_memberships("u1", "5")

        assert memberships[0].org_unit_id == 4


class TestDatabaseService:

    @pytest.mark.asyncio
    async def test_missing_dsn(self):
        with pytest.raises(ConfigurationError):
            await DatabaseService(dsn=None).initialize()

    @pytest.mark.asyncio
    async def test_acquire_failure(self):
        pool = MagicMock()
        pool.acquire = AsyncMock(side_effect=OSError("connection refused"))
        pool.close = AsyncMock()

        with patch("asyncpg.create_pool", AsyncMock(return_value=pool)):
            service = DatabaseService(dsn="postgresql://authz@localhost/authz")
            with pytest.raises(DatabaseError):
                async with service.get_connection():
                    pass
            await service.close()

        pool.close.assert_awaited_once()
        assert not service.is_initialized

    @pytest.mark.asyncio
    async def test_connection_is_released(self):
        connection = object()
        pool = MagicMock()
        pool.acquire = AsyncMock(return_value=connection)
        pool.release = AsyncMock()

        with patch("asyncpg.create_pool", AsyncMock(return_value=pool)):
            service = DatabaseService(dsn="postgresql://authz@localhost/authz")
            async with service.get_connection() as conn:
                assert conn is connection

        pool.release.assert_awaited_once_with(connection)
