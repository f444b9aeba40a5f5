"""Role closure, permission aggregation and the decision point."""

from .entities import (
    AuthzContext,
    Decision,
    GrantView,
    MatchKind,
    Operation,
    Principal,
    Requirement,
)
from .services import (
    AggregatedPermissions,
    AuthorizationStrategy,
    DecisionPoint,
    HierarchicalStrategy,
    PermissionAggregator,
    RoleClosure,
    RoleClosureEngine,
    StaticClaimsStrategy,
    create_decision_point,
)

__all__ = [
    "AuthzContext",
    "Decision",
    "GrantView",
    "MatchKind",
    "Operation",
    "Principal",
    "Requirement",
    "AggregatedPermissions",
    "AuthorizationStrategy",
    "DecisionPoint",
    "HierarchicalStrategy",
    "PermissionAggregator",
    "RoleClosure",
    "RoleClosureEngine",
    "StaticClaimsStrategy",
    "create_decision_point",
]
