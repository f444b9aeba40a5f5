"""Pytest configuration and fixtures for retail-authz tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from retail_authz.config.settings import AuthzSettings
from retail_authz.features.authorization import Principal, create_decision_point
from retail_authz.features.cache import GrantCache, MemoryCacheAdapter
from retail_authz.features.org_units import OrgUnitService
from retail_authz.features.permissions import PermissionCatalogService, PermissionRegistry
from retail_authz.features.roles import RoleGraphService

from fakes import (
    FakeOrgUnitRepository,
    FakePermissionRepository,
    FakeRoleRepository,
    FakeUserRoleRepository,
    InMemoryAuthzStore,
    RecordingErrorReporter,
)


RETAIL_TENANT = "5"
OTHER_TENANT = "6"


@pytest.fixture
def store():
    """Empty in-memory authorization store."""
    return InMemoryAuthzStore()


@pytest.fixture
def mock_database():
    """DatabaseService stand-in handing out a single AsyncMock connection."""
    connection = AsyncMock()
    connection.fetch = AsyncMock(return_value=[])
    connection.fetchrow = AsyncMock(return_value=None)
    connection.execute = AsyncMock(return_value="INSERT 0 1")

    connection_context = MagicMock()
    connection_context.__aenter__ = AsyncMock(return_value=connection)
    connection_context.__aexit__ = AsyncMock(return_value=False)

    database = MagicMock()
    database.get_connection.return_value = connection_context
    return database, connection


@pytest.fixture
def settings():
    """Settings independent of the environment: no database, no cache, no Sentry."""
    return AuthzSettings(
        _env_file=None,
        strategy="hierarchical",
        cache_backend="none",
        database_url=None,
        sentry_dsn=None,
        allowed_tenants=None,
    )


@pytest.fixture
def grant_cache():
    """Grant cache backed by a fresh in-process adapter."""
    return GrantCache(backend=MemoryCacheAdapter())


@pytest.fixture
def role_graph(store):
    return RoleGraphService(FakeRoleRepository(store), FakeUserRoleRepository(store))


@pytest.fixture
def org_units(store):
    return OrgUnitService(FakeOrgUnitRepository(store))


@pytest.fixture
def permission_repository(store):
    return FakePermissionRepository(store)


@pytest.fixture
def permission_catalog(permission_repository):
    return PermissionCatalogService(permission_repository, registry=PermissionRegistry.default())


@pytest.fixture
def error_reporter():
    """Error reporter that keeps every report in memory."""
    return RecordingErrorReporter()


@pytest.fixture
def decision_point(settings, role_graph, permission_repository, org_units, error_reporter):
    """Hierarchical decision point over the in-memory store."""
    return create_decision_point(
        settings,
        role_graph=role_graph,
        permission_repository=permission_repository,
        org_units=org_units,
        error_reporter=error_reporter,
    )


@pytest.fixture
def retail_roles(store):
    """Tenant 5: manager -> director -> vp, cashier on its own, owner at the top.

    ``inventory:view`` is granted to vp only; ``sale:create`` to cashier.
    """
    owner = store.add_role("owner", RETAIL_TENANT)
    vp = store.add_role("vp", RETAIL_TENANT)
    director = store.add_role("director", RETAIL_TENANT, parent=vp)
    manager = store.add_role("manager", RETAIL_TENANT, parent=director)
    cashier = store.add_role("cashier", RETAIL_TENANT)

    store.grant(vp, "inventory:view")
    store.grant(director, "report:view")
    store.grant(cashier, "sale:create")

    store.assign("u1", manager)
    store.assign("u2", cashier)
    store.assign("u9", owner)
    return {
        "owner": owner,
        "vp": vp,
        "director": director,
        "manager": manager,
        "cashier": cashier,
    }


@pytest.fixture
def manager_principal():
    return Principal(id="u1", tenant_id=RETAIL_TENANT, base_role="manager")


@pytest.fixture
def cashier_principal():
    return Principal(id="u2", tenant_id=RETAIL_TENANT, base_role="cashier")


@pytest.fixture
def owner_principal():
    return Principal(id="u9", tenant_id=RETAIL_TENANT, base_role="owner")
