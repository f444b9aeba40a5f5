"""HTTP status code mapping for exceptions.

The map is keyed by exception class; lookup walks the exception's MRO so
the most specific registered class wins.
"""

from typing import Dict, Type

from .base import RetailAuthzError
from .authz import (
    ForbiddenError,
    InternalAuthzError,
    InvalidTenantHeaderError,
    RequirementDeclarationError,
    RoleHierarchyError,
    TenantError,
    TenantMissingError,
    TenantNotAllowedError,
    UnauthenticatedError,
)
from .infrastructure import CacheError, ConfigurationError, DatabaseError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    TenantError: 400,
    TenantMissingError: 400,
    InvalidTenantHeaderError: 400,
    RoleHierarchyError: 400,

    # 401 Unauthorized
    UnauthenticatedError: 401,

    # 403 Forbidden
    TenantNotAllowedError: 403,
    ForbiddenError: 403,

    # 500 Internal Server Error
    InternalAuthzError: 500,
    RequirementDeclarationError: 500,
    DatabaseError: 500,
    CacheError: 500,
    ConfigurationError: 500,

    # Default for RetailAuthzError
    RetailAuthzError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception instance."""
    if isinstance(exception, ForbiddenError):
        return exception.status_code

    for exc_class in type(exception).__mro__:
        if exc_class in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_class]
    return 500
