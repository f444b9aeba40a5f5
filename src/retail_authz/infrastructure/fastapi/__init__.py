"""FastAPI integration: route requirements, exception handlers and wiring."""

from .dependencies import (
    RequireAuthorization,
    get_authz_context,
    get_components,
    get_request_tenant,
    require,
)
from .exception_handlers import register_exception_handlers, request_error_context
from .factory import AuthzComponents

__all__ = [
    "AuthzComponents",
    "RequireAuthorization",
    "get_authz_context",
    "get_components",
    "get_request_tenant",
    "register_exception_handlers",
    "request_error_context",
    "require",
]
