"""Exception hierarchy for retail-authz."""

from .base import RetailAuthzError, create_error_response, get_http_status_code
from .authz import (
    ForbiddenError,
    InternalAuthzError,
    InvalidTenantHeaderError,
    OrgUnitCycleError,
    RequirementDeclarationError,
    RoleCycleError,
    RoleHierarchyError,
    TenantError,
    TenantMissingError,
    TenantNotAllowedError,
    TenantResolutionError,
    UnauthenticatedError,
)
from .infrastructure import CacheError, ConfigurationError, DatabaseError
from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    "RetailAuthzError",
    "create_error_response",
    "get_http_status_code",
    "HTTP_STATUS_MAP",
    "ForbiddenError",
    "InternalAuthzError",
    "InvalidTenantHeaderError",
    "OrgUnitCycleError",
    "RequirementDeclarationError",
    "RoleCycleError",
    "RoleHierarchyError",
    "TenantError",
    "TenantMissingError",
    "TenantNotAllowedError",
    "TenantResolutionError",
    "UnauthenticatedError",
    "CacheError",
    "ConfigurationError",
    "DatabaseError",
]
