"""retail-authz - Multi-tenant authorization engine for the retail operations backend.

Resolves the tenant of each request, computes role closures over a tenant's
role hierarchy, aggregates effective permissions and decides declarative
requirements, recording every outcome in an audit trail.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import AuthzSettings, get_settings

from .core.exceptions import (
    # Base Exception
    RetailAuthzError,

    # Request outcomes
    UnauthenticatedError,
    TenantError,
    TenantMissingError,
    TenantNotAllowedError,
    InvalidTenantHeaderError,
    ForbiddenError,

    # Failures
    InternalAuthzError,
    RoleCycleError,
    OrgUnitCycleError,
    TenantResolutionError,
    RequirementDeclarationError,
    RoleHierarchyError,
    DatabaseError,
    CacheError,
    ConfigurationError,

    # Utility Functions
    get_http_status_code,
    create_error_response,
)

from .features.authorization import (
    AuthzContext,
    Decision,
    DecisionPoint,
    Operation,
    Principal,
    Requirement,
    create_decision_point,
)
from .features.audit import AuditEmitter, AuditEvent
from .features.permissions import PermissionRegistry
from .features.tenancy import TenantContext, TenantRequest, TenantResolver

from .infrastructure.fastapi import (
    AuthzComponents,
    RequireAuthorization,
    get_authz_context,
    register_exception_handlers,
    require,
)

__all__ = [
    "__version__",
    "AuthzSettings",
    "get_settings",
    "RetailAuthzError",
    "UnauthenticatedError",
    "TenantError",
    "TenantMissingError",
    "TenantNotAllowedError",
    "InvalidTenantHeaderError",
    "ForbiddenError",
    "InternalAuthzError",
    "RoleCycleError",
    "OrgUnitCycleError",
    "TenantResolutionError",
    "RequirementDeclarationError",
    "RoleHierarchyError",
    "DatabaseError",
    "CacheError",
    "ConfigurationError",
    "get_http_status_code",
    "create_error_response",
    "AuthzContext",
    "Decision",
    "DecisionPoint",
    "Operation",
    "Principal",
    "Requirement",
    "create_decision_point",
    "AuditEmitter",
    "AuditEvent",
    "PermissionRegistry",
    "TenantContext",
    "TenantRequest",
    "TenantResolver",
    "AuthzComponents",
    "RequireAuthorization",
    "get_authz_context",
    "register_exception_handlers",
    "require",
]
