"""Accessors for what upstream middleware attaches to ``request.state``."""

from typing import Any, Mapping, Optional

from starlette.requests import Request

from ...features.authorization.entities import Principal
from ...features.tenancy import TenantContext


def get_principal(request: Request) -> Optional[Principal]:
    """The authenticated principal, accepting a Principal or verified claims."""
    value: Any = getattr(request.state, "principal", None)
    if value is None or isinstance(value, Principal):
        return value
    if isinstance(value, Mapping):
        principal = Principal.from_claims(value)
        request.state.principal = principal
        return principal
    return None


def get_tenant_context(request: Request) -> Optional[TenantContext]:
    return getattr(request.state, "tenant_context", None)


def get_org_unit_id(request: Request, principal: Optional[Principal]) -> Optional[int]:
    """Org unit of the request, falling back to the principal's."""
    org_unit_id = getattr(request.state, "org_unit_id", None)
    if org_unit_id is not None:
        return int(org_unit_id)
    return principal.org_unit_id if principal is not None else None
