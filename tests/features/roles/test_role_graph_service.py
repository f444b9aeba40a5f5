"""Tests for the role graph service and its hierarchy guards."""

from datetime import datetime, timezone

import pytest

from retail_authz.core.exceptions import RoleCycleError, RoleHierarchyError
from retail_authz.features.roles.entities import Role, UserRole

RETAIL_TENANT = "5"
OTHER_TENANT = "6"


class TestRoleEntities:

    def test_role_name_required(self):
        with pytest.raises(ValueError):
            Role(id=1, name=" ", tenant_id=RETAIL_TENANT)

    def test_validity_window_must_be_ordered(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)

        with pytest.raises(ValueError):
            UserRole(user_id="u1", role_id=1, tenant_id=RETAIL_TENANT, valid_from=start, valid_to=start)

    def test_valid_to_is_exclusive(self):
        end = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assignment = UserRole(user_id="u1", role_id=1, tenant_id=RETAIL_TENANT, valid_to=end)

        assert not assignment.is_effective_at(end)
        # Naive timestamps are read as UTC
        assert assignment.is_effective_at(datetime(2023, 12, 31, 23, 59))


class TestRoleGraphService:

    @pytest.mark.asyncio
    async def test_role_index_is_tenant_scoped(self, store, role_graph):
        store.add_role("vp", RETAIL_TENANT)
        store.add_role("vp", OTHER_TENANT)

        index = await role_graph.role_index(RETAIL_TENANT)

        assert [role.tenant_id for role in index.values()] == [RETAIL_TENANT]

    @pytest.mark.asyncio
    async def test_create_role_under_parent(self, store, role_graph):
        vp = await role_graph.create_role("vp", RETAIL_TENANT)
        director = await role_graph.create_role("director", RETAIL_TENANT, parent_role_id=vp.id)

        assert director.parent_role_id == vp.id

    @pytest.mark.asyncio
    async def test_create_role_rejects_foreign_parent(self, store, role_graph):
        foreign = store.add_role("vp", OTHER_TENANT)

        with pytest.raises(RoleHierarchyError):
            await role_graph.create_role("director", RETAIL_TENANT, parent_role_id=foreign.id)

    @pytest.mark.asyncio
    async def test_set_parent_rejects_cycle(self, store, role_graph):
        vp = store.add_role("vp", RETAIL_TENANT)
        director = store.add_role("director", RETAIL_TENANT, parent=vp)
        manager = store.add_role("manager", RETAIL_TENANT, parent=director)

        with pytest.raises(RoleHierarchyError):
            await role_graph.set_parent(vp.id, manager.id, RETAIL_TENANT)
        with pytest.raises(RoleHierarchyError):
            await role_graph.set_parent(vp.id, vp.id, RETAIL_TENANT)

        assert store.roles[vp.id].parent_role_id is None

    @pytest.mark.asyncio
    async def test_set_parent_rejects_foreign_parent(self, store, role_graph):
        local = store.add_role("manager", RETAIL_TENANT)
        foreign = store.add_role("director", OTHER_TENANT)

        with pytest.raises(RoleHierarchyError):
            await role_graph.set_parent(local.id, foreign.id, RETAIL_TENANT)

    @pytest.mark.asyncio
    async def test_set_parent_on_unknown_role(self, role_graph):
        with pytest.raises(RoleHierarchyError):
            await role_graph.set_parent(404, None, RETAIL_TENANT)

    @pytest.mark.asyncio
    async def test_set_parent_moves_subtree(self, store, role_graph):
        vp = store.add_role("vp", RETAIL_TENANT)
        director = store.add_role("director", RETAIL_TENANT)

        updated = await role_graph.set_parent(director.id, vp.id, RETAIL_TENANT)

        assert updated.parent_role_id == vp.id

    @pytest.mark.asyncio
    async def test_set_parent_detects_stored_cycle(self, store, role_graph):
        r1 = store.add_role("r1", RETAIL_TENANT)
        r2 = store.add_role("r2", RETAIL_TENANT, parent=r1)
        store.force_parent(r1, r2.id)
        other = store.add_role("other", RETAIL_TENANT)

        with pytest.raises(RoleCycleError):
            await role_graph.set_parent(other.id, r1.id, RETAIL_TENANT)

    @pytest.mark.asyncio
    async def test_assign_unknown_role(self, role_graph):
        with pytest.raises(RoleHierarchyError):
            await role_graph.assign_role("u1", 404, RETAIL_TENANT)

    @pytest.mark.asyncio
    async def test_assign_and_revoke(self, store, role_graph):
        clerk = store.add_role("clerk", RETAIL_TENANT)

        await role_graph.assign_role("u1", clerk.id, RETAIL_TENANT, org_unit_id=3)
        assignments = await role_graph.assignments_for("u1", RETAIL_TENANT)

        assert [a.role_id for a in assignments] == [clerk.id]
        assert await role_graph.revoke_role("u1", clerk.id, RETAIL_TENANT, org_unit_id=3)
        assert not await role_graph.revoke_role("u1", clerk.id, RETAIL_TENANT, org_unit_id=3)
