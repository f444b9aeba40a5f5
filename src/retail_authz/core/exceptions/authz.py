"""Authorization-specific exceptions for retail-authz."""

from typing import Any, Dict, Optional

from .base import RetailAuthzError


class UnauthenticatedError(RetailAuthzError):
    """Raised when no authenticated principal is attached to the request."""
    pass


class TenantError(RetailAuthzError):
    """Base exception for tenant resolution errors."""
    pass


class TenantMissingError(TenantError):
    """Raised when no source yields a tenant for the request."""
    pass


class TenantNotAllowedError(TenantError):
    """Raised when the resolved tenant is not permitted."""
    pass


class InvalidTenantHeaderError(TenantNotAllowedError):
    """Raised when the tenant header carries a reserved property name."""
    pass


class ForbiddenError(RetailAuthzError):
    """Raised for an ordinary deny. Message and status are caller-overridable."""

    def __init__(
        self,
        message: str,
        status_code: int = 403,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code


class InternalAuthzError(RetailAuthzError):
    """Infrastructure failure while authorizing. Never a deny, never an allow."""

    # Set once the error has been forwarded to the error reporter
    reported: bool = False


class RoleCycleError(InternalAuthzError):
    """Raised when the role parent chain loops back on itself."""
    pass


class OrgUnitCycleError(InternalAuthzError):
    """Raised when the org unit parent chain loops back on itself."""
    pass


class TenantResolutionError(InternalAuthzError):
    """Raised when a custom tenant resolver fails."""
    pass


class RequirementDeclarationError(RetailAuthzError):
    """Raised at route registration when a requirement is malformed."""
    pass


class RoleHierarchyError(RetailAuthzError):
    """Raised when an administrative change would break the role forest."""
    pass
