"""
Declarative route protection for FastAPI.

    @router.get("/inventory", dependencies=[Depends(require(permissions=["inventory:view"]))])

``require(...)`` builds and validates its requirement when the route is
declared. At request time the dependency decides, records exactly one audit
event, raises ``ForbiddenError`` on deny and yields the sealed
``AuthzContext`` on allow. The allow record is written once the handler
returns or raises, so a handler failure never loses it.
"""

from typing import Any, AsyncIterator, Dict, Iterable, Mapping, Optional

from fastapi import Request
from loguru import logger

from ...config.constants import AuditOutcome, DEFAULT_DENY_MESSAGE, DEFAULT_DENY_STATUS
from ...core.exceptions import (
    ConfigurationError,
    ForbiddenError,
    InternalAuthzError,
    RetailAuthzError,
    UnauthenticatedError,
)
from ...features.audit import AuditEvent
from ...features.authorization import AuthzContext, Decision, Operation, Principal, Requirement
from ...features.permissions import PermissionRegistry
from ...features.tenancy import TenantContext
from ..middleware import build_tenant_request, get_org_unit_id, get_principal, get_tenant_context
from .factory import AuthzComponents


def get_components(request: Request) -> AuthzComponents:
    components = getattr(request.app.state, "authz", None)
    if components is None:
        raise ConfigurationError("Authorization components are not installed on this application")
    return components


async def get_request_tenant(request: Request) -> TenantContext:
    """Tenant context from the middleware, resolved here when the middleware is absent."""
    tenant_context = get_tenant_context(request)
    if tenant_context is None:
        components = get_components(request)
        tenant_context = await components.tenant_resolver.resolve(build_tenant_request(request))
        request.state.tenant_context = tenant_context
        request.state.tenant_id = tenant_context.tenant_id
    return tenant_context


def get_authz_context(request: Request) -> AuthzContext:
    """Sealed context of the protected route handling ``request``."""
    context = getattr(request.state, "authz_context", None)
    if context is None:
        raise ConfigurationError("Route is not protected by require(...)")
    return context


class RequireAuthorization:
    """FastAPI dependency protecting a route with a declarative requirement.

    Args:
        roles: acceptable role names
        permissions: acceptable permission names
        resource_permissions: resource -> acceptable permission names
        action_permissions: ``METHOD:/path`` -> acceptable permission names
        resource: resource tag of the route, enabling the resource clause
        base_path: mount prefix used for the ``METHOD:BASE_PATH`` fallback
        resource_id_param: path parameter recorded as the audited resource id
        deny_message: message of the 4xx response on deny
        deny_status: status of the response on deny
        registry: known permission names; ``None`` uses the retail catalog
        validate: check permission names against the registry
    """

    def __init__(
        self,
        roles: Optional[Iterable[str]] = None,
        permissions: Optional[Iterable[str]] = None,
        resource_permissions: Optional[Mapping[str, Iterable[str]]] = None,
        action_permissions: Optional[Mapping[str, Iterable[str]]] = None,
        resource: Optional[str] = None,
        base_path: Optional[str] = None,
        resource_id_param: Optional[str] = None,
        audit_action: Optional[str] = None,
        deny_message: str = DEFAULT_DENY_MESSAGE,
        deny_status: int = DEFAULT_DENY_STATUS,
        registry: Optional[PermissionRegistry] = None,
        validate: bool = True,
    ):
        self.requirement = Requirement(
            roles=roles or (),
            permissions=permissions or (),
            resource_permissions=resource_permissions or {},
            action_permissions=action_permissions or {},
            deny_message=deny_message,
            deny_status=deny_status,
        )
        if validate:
            self.requirement.validate(registry or PermissionRegistry.default())

        self.resource = resource
        self.base_path = base_path
        self.resource_id_param = resource_id_param
        self.audit_action = audit_action
        logger.debug(f"Declared {self.requirement}")

    async def __call__(self, request: Request) -> AsyncIterator[AuthzContext]:
        components = get_components(request)
        principal = get_principal(request)
        operation = Operation(
            method=request.method,
            path=request.url.path,
            base_path=self.base_path,
            resource=self.resource or getattr(request.state, "resource", None),
        )

        if principal is None:
            event = self._event(request, operation, None, None, AuditOutcome.DENY, reason="unauthenticated")
            components.audit_emitter.emit(event)
            raise UnauthenticatedError("Unauthorized: User not authenticated")

        try:
            tenant = await get_request_tenant(request)
        except RetailAuthzError as e:
            outcome = AuditOutcome.ERROR if isinstance(e, InternalAuthzError) else AuditOutcome.DENY
            event = self._event(
                request, operation, None, None, outcome, reason=e.error_code, principal=principal
            )
            components.audit_emitter.emit(event)
            raise

        context = AuthzContext(
            principal=principal,
            tenant=tenant,
            requirement=self.requirement,
            operation=operation,
            org_unit_id=get_org_unit_id(request, principal),
        )

        try:
            decision = await components.decision_point.evaluate(context)
        except InternalAuthzError as e:
            event = self._event(
                request, operation, context, None, AuditOutcome.ERROR, reason=e.error_code
            )
            components.audit_emitter.emit(event)
            raise

        if not decision.allowed:
            event = self._event(request, operation, context, decision, AuditOutcome.DENY)
            components.audit_emitter.emit(event)
            raise ForbiddenError(
                self.requirement.deny_message,
                status_code=self.requirement.deny_status,
                details={"reason": decision.reason},
            )

        sealed = context.seal(decision)
        request.state.authz_context = sealed

        handler_error = None
        try:
            yield sealed
        except Exception as e:
            handler_error = e.__class__.__name__
            raise
        finally:
            event = self._event(
                request, operation, context, decision, AuditOutcome.ALLOW, handler_error=handler_error
            )
            components.audit_emitter.emit(event)

    def _event(
        self,
        request: Request,
        operation: Operation,
        context: Optional[AuthzContext],
        decision: Optional[Decision],
        outcome: AuditOutcome,
        reason: Optional[str] = None,
        principal: Optional[Principal] = None,
        handler_error: Optional[str] = None,
    ) -> AuditEvent:
        route = request.scope.get("route")
        route_path = getattr(route, "path", operation.path)
        audit_context: Dict[str, Any] = {
            "method": operation.method,
            "path": operation.path,
            "query": dict(request.query_params),
            "path_params": dict(request.path_params),
        }
        if context is not None and context.tenant.is_owner_override:
            audit_context["owner_override"] = True
        if decision is not None and decision.strategy:
            audit_context["strategy"] = decision.strategy
        if handler_error is not None:
            audit_context["handler_error"] = handler_error

        resource_id = None
        if self.resource_id_param:
            resource_id = request.path_params.get(self.resource_id_param)

        return AuditEvent(
            action=self.audit_action or f"{operation.method} {route_path}",
            outcome=outcome,
            tenant_id=context.tenant_id if context is not None else getattr(request.state, "tenant_id", None),
            user_id=context.user_id if context is not None else getattr(principal, "id", None),
            resource=operation.resource,
            resource_id=resource_id,
            reason=reason or (decision.reason if decision is not None else None),
            matched_by=decision.matched_by.value if decision is not None and decision.matched_by else None,
            ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            context=audit_context,
        )


def require(
    roles: Optional[Iterable[str]] = None,
    permissions: Optional[Iterable[str]] = None,
    resource_permissions: Optional[Mapping[str, Iterable[str]]] = None,
    action_permissions: Optional[Mapping[str, Iterable[str]]] = None,
    **options: Any,
) -> RequireAuthorization:
    """
    Functional form of ``RequireAuthorization``.

    Usage Examples:
        Depends(require(permissions=["inventory:view"]))

        Depends(require(roles=["manager"], permissions=["sale:refund"]))

        Depends(require(
            resource="product",
            resource_permissions={"product": ["product:edit"]},
            action_permissions={"DELETE:/api/products": ["product:delete"]},
            deny_message="Only catalog managers may change products",
        ))
    """
    return RequireAuthorization(
        roles=roles,
        permissions=permissions,
        resource_permissions=resource_permissions,
        action_permissions=action_permissions,
        **options,
    )
