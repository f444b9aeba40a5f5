"""
Wiring of the authorization engine into a FastAPI application.

``AuthzComponents`` builds every store, cache and service from settings and
installs the tenant middleware and exception handlers on an app.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from ...config.settings import AuthzSettings, get_settings
from ...features.audit import AsyncPGAuditRepository, AuditEmitter, LoggingAuditSink
from ...features.authorization import DecisionPoint, create_decision_point
from ...features.cache import CacheBackend, GrantCache, create_cache_backend
from ...features.database import DatabaseService
from ...features.org_units import AsyncPGOrgUnitRepository, OrgUnitService
from ...features.permissions import (
    AsyncPGPermissionRepository,
    PermissionCatalogService,
    PermissionRegistry,
)
from ...features.roles import AsyncPGRoleRepository, AsyncPGUserRoleRepository, RoleGraphService
from ...features.tenancy import OwnerOverride, TenantResolver
from ...features.tenancy.services.tenant_resolver import TenantResolverFunc
from ..error_reporting import ErrorReporter, create_error_reporter
from ..middleware import TenantContextMiddleware
from .exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)


@dataclass
class AuthzComponents:
    """Everything a protected route needs, built once per application."""

    settings: AuthzSettings
    decision_point: DecisionPoint
    tenant_resolver: TenantResolver
    audit_emitter: AuditEmitter
    error_reporter: ErrorReporter
    registry: PermissionRegistry
    database: Optional[DatabaseService] = None
    cache_backend: Optional[CacheBackend] = None
    grant_cache: Optional[GrantCache] = None
    role_graph: Optional[RoleGraphService] = None
    org_units: Optional[OrgUnitService] = None
    permission_catalog: Optional[PermissionCatalogService] = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[AuthzSettings] = None,
        custom_tenant_resolver: Optional[TenantResolverFunc] = None,
        database: Optional[DatabaseService] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ) -> "AuthzComponents":
        settings = settings or get_settings()
        error_reporter = error_reporter or create_error_reporter(settings)
        registry = PermissionRegistry.default()

        tenant_resolver = TenantResolver.from_settings(
            settings,
            custom_resolver=custom_tenant_resolver,
            owner_override=OwnerOverride.from_settings(settings),
        )

        audit_emitter = AuditEmitter([LoggingAuditSink()])

        if database is None and settings.database_url:
            database = DatabaseService.from_settings(settings)

        cache_backend = create_cache_backend(settings)
        grant_cache = GrantCache.from_settings(settings, cache_backend)

        role_graph = org_units = permission_catalog = None
        permission_repository = None
        if database is not None:
            role_graph = RoleGraphService(
                AsyncPGRoleRepository(database),
                AsyncPGUserRoleRepository(database),
                grant_cache=grant_cache,
            )
            org_units = OrgUnitService(AsyncPGOrgUnitRepository(database))
            permission_repository = AsyncPGPermissionRepository(database)
            permission_catalog = PermissionCatalogService(
                permission_repository, grant_cache=grant_cache, registry=registry
            )
            if settings.audit_to_database:
                audit_emitter.add_sink(AsyncPGAuditRepository(database))

        decision_point = create_decision_point(
            settings,
            role_graph=role_graph,
            permission_repository=permission_repository,
            org_units=org_units,
            grant_cache=grant_cache,
            error_reporter=error_reporter,
        )

        logger.info(
            f"Authorization engine configured: strategy={settings.strategy.value}, "
            f"cache={settings.cache_backend.value}"
        )
        return cls(
            settings=settings,
            decision_point=decision_point,
            tenant_resolver=tenant_resolver,
            audit_emitter=audit_emitter,
            error_reporter=error_reporter,
            registry=registry,
            database=database,
            cache_backend=cache_backend,
            grant_cache=grant_cache,
            role_graph=role_graph,
            org_units=org_units,
            permission_catalog=permission_catalog,
        )

    def install(self, app: FastAPI, tenant_middleware: bool = True) -> FastAPI:
        """Attach components, tenant middleware and exception handlers to ``app``."""
        app.state.authz = self
        if tenant_middleware:
            app.add_middleware(
                TenantContextMiddleware,
                resolver=self.tenant_resolver,
                exempt_paths=self.settings.exempt_paths,
                error_reporter=self.error_reporter,
                audit_emitter=self.audit_emitter,
            )
        register_exception_handlers(app, self.error_reporter)
        return app

    async def startup(self) -> None:
        if self.database is not None:
            await self.database.initialize()

    async def shutdown(self) -> None:
        """Flush pending audit writes and release connections."""
        await self.audit_emitter.drain()
        if self.cache_backend is not None:
            await self.cache_backend.close()
        if self.database is not None:
            await self.database.close()

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """Lifespan handler: ``FastAPI(lifespan=components.lifespan)``."""
        await self.startup()
        try:
            yield
        finally:
            await self.shutdown()
