"""
Authorization Decision Point.

Single entry point for authorization decisions. A configured strategy
supplies the principal's grants; the requirement matcher turns them into an
allow or a deny. Deny is a value. Infrastructure failures raise
``InternalAuthzError`` and are forwarded to the error reporter; they are
never turned into a deny or an allow.
"""

from typing import TYPE_CHECKING, Optional, Union

from loguru import logger

from .permission_aggregator import PermissionAggregator
from .role_closure import RoleClosureEngine
from .strategies import AuthorizationStrategy, HierarchicalStrategy, StaticClaimsStrategy, evaluate_grants
from ..entities import AuthzContext, Decision, MatchKind, Operation, Principal, Requirement
from ...org_units.services import OrgUnitService
from ...permissions.entities import PermissionRepository
from ...roles.services import RoleGraphService
from ...tenancy.entities import TenantContext
from ....config.constants import AuthzStrategyName, TenantSource
from ....core.exceptions import (
    ConfigurationError,
    DatabaseError,
    InternalAuthzError,
    TenantMissingError,
    UnauthenticatedError,
)

if TYPE_CHECKING:
    from ...cache.services.grant_cache import GrantCache
    from ....infrastructure.error_reporting import ErrorReporter


class DecisionPoint:
    """Evaluates requirements against the grants of a principal."""

    def __init__(
        self,
        strategy: AuthorizationStrategy,
        error_reporter: Optional["ErrorReporter"] = None,
    ):
        self.strategy = strategy
        self.error_reporter = error_reporter

    async def decide(
        self,
        principal: Optional[Principal],
        requirement: Requirement,
        tenant: Union[TenantContext, str, None] = None,
        operation: Optional[Operation] = None,
        org_unit_id: Optional[int] = None,
    ) -> Decision:
        """Decide whether ``principal`` satisfies ``requirement`` in ``tenant``.

        Raises:
            UnauthenticatedError: no principal
            TenantMissingError: no tenant
            InternalAuthzError: the stores could not answer
        """
        if principal is None:
            raise UnauthenticatedError("Unauthorized: User not authenticated")
        if tenant is None or (isinstance(tenant, str) and not tenant.strip()):
            raise TenantMissingError("Tenant context required.")
        if isinstance(tenant, str):
            tenant = TenantContext(tenant_id=tenant.strip(), source=TenantSource.CUSTOM)

        context = AuthzContext(
            principal=principal,
            tenant=tenant,
            requirement=requirement,
            operation=operation,
            org_unit_id=org_unit_id if org_unit_id is not None else principal.org_unit_id,
        )
        return await self.evaluate(context)

    async def evaluate(self, context: AuthzContext) -> Decision:
        """Decide for a prepared context. Performs reads only."""
        if context.principal is None:
            raise UnauthenticatedError("Unauthorized: User not authenticated")

        try:
            grants = await self.strategy.resolve(context)
        except DatabaseError as e:
            error = InternalAuthzError(
                "Authorization data is unavailable",
                details={"cause": e.error_code, "operation": e.details.get("operation")},
            )
            self._report(error, context)
            raise error from e
        except InternalAuthzError as e:
            self._report(e, context)
            raise

        decision = evaluate_grants(
            context.requirement, grants, context.operation, strategy=self.strategy.name
        )
        self._log(context, decision)
        return decision

    def _log(self, context: AuthzContext, decision: Decision) -> None:
        bound = logger.bind(
            tenant_id=context.tenant_id,
            user_id=context.user_id,
            strategy=decision.strategy,
            path=context.operation.path if context.operation else None,
        )
        if decision.matched_by == MatchKind.SHORTCUT:
            bound.bind(event="AUTHZ_SHORTCUT", shortcut_role=decision.shortcut_role).info(
                f"Shortcut role {decision.shortcut_role} allowed user {context.user_id} "
                f"in tenant {context.tenant_id}"
            )
        elif not decision.allowed:
            bound.bind(event="AUTHZ_DENIED", requirement=str(context.requirement)).info(
                f"Access denied for user {context.user_id}: {decision.reason}"
            )
        else:
            bound.debug(f"Access allowed for user {context.user_id} by {decision.matched_by.value}")

    def _report(self, error: InternalAuthzError, context: AuthzContext) -> None:
        logger.bind(
            event="AUTHZ_INTERNAL_ERROR",
            tenant_id=context.tenant_id,
            user_id=context.user_id,
        ).error(f"Authorization failed internally: {error.message}")

        if self.error_reporter is not None and not error.reported:
            self.error_reporter.report(error, {
                "tenant_id": context.tenant_id,
                "user_id": context.user_id,
                "method": context.operation.method if context.operation else None,
                "path": context.operation.path if context.operation else None,
            })
            error.reported = True


def create_decision_point(
    settings,
    role_graph: Optional[RoleGraphService] = None,
    permission_repository: Optional[PermissionRepository] = None,
    org_units: Optional[OrgUnitService] = None,
    grant_cache: Optional["GrantCache"] = None,
    error_reporter: Optional["ErrorReporter"] = None,
) -> DecisionPoint:
    """Build a decision point for the strategy named in settings."""
    name = AuthzStrategyName(settings.strategy)

    if name == AuthzStrategyName.STATIC:
        strategy: AuthorizationStrategy = StaticClaimsStrategy()
    else:
        if role_graph is None or permission_repository is None:
            raise ConfigurationError(
                "The hierarchical strategy needs a role graph and a permission repository"
            )
        closure_engine = RoleClosureEngine(
            role_graph,
            org_units=org_units,
            enforce_validity=settings.enforce_assignment_validity,
            inherit_org_unit_assignments=settings.inherit_org_unit_assignments,
        )
        aggregator = PermissionAggregator(
            permission_repository,
            shortcut_roles=settings.shortcut_role_names,
        )
        strategy = HierarchicalStrategy(closure_engine, aggregator, grant_cache=grant_cache)

    return DecisionPoint(strategy, error_reporter=error_reporter)
