"""Authorization services."""

from .decision_point import DecisionPoint, create_decision_point
from .permission_aggregator import AggregatedPermissions, PermissionAggregator
from .role_closure import RoleClosure, RoleClosureEngine, expand_roles
from .strategies import (
    AuthorizationStrategy,
    HierarchicalStrategy,
    StaticClaimsStrategy,
    evaluate_grants,
    match_requirement,
)

__all__ = [
    "DecisionPoint",
    "create_decision_point",
    "AggregatedPermissions",
    "PermissionAggregator",
    "RoleClosure",
    "RoleClosureEngine",
    "expand_roles",
    "AuthorizationStrategy",
    "HierarchicalStrategy",
    "StaticClaimsStrategy",
    "evaluate_grants",
    "match_requirement",
]
