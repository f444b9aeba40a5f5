"""
Interchangeable ways of learning what a principal holds in a tenant.

``StaticClaimsStrategy`` trusts the base role and permission claims of the
principal. ``HierarchicalStrategy`` reads the role graph and permission
catalog. Both hand a ``GrantView`` to the same requirement matcher, so the
decision rules do not depend on the strategy in use.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional, Protocol, runtime_checkable

from .permission_aggregator import PermissionAggregator
from .role_closure import RoleClosureEngine
from ..entities import AuthzContext, Decision, GrantView, MatchKind, Operation, Requirement
from ....config.constants import AuthzStrategyName, INSUFFICIENT_PERMISSIONS, STATIC_ALWAYS_ALLOWED_ROLES

if TYPE_CHECKING:
    from ...cache.services.grant_cache import GrantCache


@runtime_checkable
class AuthorizationStrategy(Protocol):
    """Resolves the grants of the principal in an authorization context."""

    name: str

    @abstractmethod
    async def resolve(self, context: AuthzContext) -> GrantView:
        ...


class StaticClaimsStrategy:
    """Grants taken from the principal's own claims.

    Claims are honoured only when the principal belongs to the request tenant.
    """

    name = AuthzStrategyName.STATIC.value

    def __init__(self, always_allowed_roles: Iterable[str] = STATIC_ALWAYS_ALLOWED_ROLES):
        self.always_allowed_roles = frozenset(r.strip().lower() for r in always_allowed_roles)

    async def resolve(self, context: AuthzContext) -> GrantView:
        principal = context.principal
        if principal.tenant_id is None or principal.tenant_id != context.tenant_id:
            return GrantView.empty(context.tenant_id)

        role_names = frozenset({principal.base_role}) if principal.base_role else frozenset()
        shortcut = principal.base_role if principal.base_role in self.always_allowed_roles else None
        return GrantView(
            tenant_id=context.tenant_id,
            role_names=role_names,
            permissions=principal.permissions,
            shortcut_role=shortcut,
        )


class HierarchicalStrategy:
    """Grants computed from the role closure and the permission catalog."""

    name = AuthzStrategyName.HIERARCHICAL.value

    def __init__(
        self,
        closure_engine: RoleClosureEngine,
        aggregator: PermissionAggregator,
        grant_cache: Optional["GrantCache"] = None,
    ):
        self.closure_engine = closure_engine
        self.aggregator = aggregator
        self.grant_cache = grant_cache

    async def resolve(self, context: AuthzContext) -> GrantView:
        tenant_id = context.tenant_id
        user_id = context.user_id
        org_unit_id = context.org_unit_id

        if self.grant_cache is not None:
            cached = await self.grant_cache.get_grants(tenant_id, user_id, org_unit_id)
            if cached is not None and cached.get("tenant_id") == tenant_id:
                return GrantView.from_dict(cached)

        closure = await self.closure_engine.closure(user_id, tenant_id, org_unit_id)
        aggregated = await self.aggregator.aggregate(closure, tenant_id)
        view = GrantView(
            tenant_id=tenant_id,
            role_names=closure.role_names,
            permissions=aggregated.permissions,
            role_ids=closure.role_ids,
            shortcut_role=aggregated.shortcut_role,
        )

        if self.grant_cache is not None:
            await self.grant_cache.set_grants(
                tenant_id, user_id, org_unit_id, view.to_dict(), shortcut=view.is_shortcut
            )
        return view


def match_requirement(
    requirement: Requirement,
    grants: GrantView,
    operation: Optional[Operation] = None,
) -> Optional[MatchKind]:
    """The first clause of ``requirement`` satisfied by ``grants``, if any."""
    if grants.is_shortcut:
        return MatchKind.SHORTCUT

    if requirement.roles & grants.role_names:
        return MatchKind.ROLE

    if requirement.permissions & grants.permissions:
        return MatchKind.PERMISSION

    if operation is not None and operation.resource and requirement.resource_permissions:
        accepted = requirement.resource_permissions.get(operation.resource)
        if accepted and accepted & grants.permissions:
            return MatchKind.RESOURCE

    if operation is not None and requirement.action_permissions:
        accepted = requirement.action_permissions.get(operation.action_key)
        if accepted is None and operation.base_action_key is not None:
            accepted = requirement.action_permissions.get(operation.base_action_key)
        if accepted and accepted & grants.permissions:
            return MatchKind.ACTION

    return None


def evaluate_grants(
    requirement: Requirement,
    grants: GrantView,
    operation: Optional[Operation] = None,
    strategy: Optional[str] = None,
) -> Decision:
    matched = match_requirement(requirement, grants, operation)
    if matched is None:
        return Decision.deny(INSUFFICIENT_PERMISSIONS, role_names=grants.role_names, strategy=strategy)
    return Decision.allow(
        matched,
        role_names=grants.role_names,
        shortcut_role=grants.shortcut_role if matched == MatchKind.SHORTCUT else None,
        strategy=strategy,
    )
