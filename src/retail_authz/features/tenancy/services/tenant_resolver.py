"""
Tenant context resolution.

Resolution order, first match wins:

1. a custom resolver callable (sync or async)
2. the tenant claim of the authenticated principal
3. the tenant header, trimmed, rejecting reserved property names
4. the leftmost host label when the host has more than two labels

The resolver fails closed: no source means ``TenantMissingError``.
"""

import inspect
import ipaddress
from typing import Any, Callable, Iterable, Optional, Tuple

from loguru import logger

from .owner_override import OwnerOverride
from ..entities import TenantContext, TenantRequest
from ....config.constants import DEFAULT_TENANT_HEADER, RESERVED_TENANT_NAMES, TenantSource
from ....core.exceptions import (
    InvalidTenantHeaderError,
    TenantMissingError,
    TenantNotAllowedError,
    TenantResolutionError,
)

TenantResolverFunc = Callable[[TenantRequest], Any]


def _normalize(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    normalized = str(value).strip()
    return normalized or None


def extract_subdomain(host: Optional[str]) -> Optional[str]:
    """Leftmost label of a host with more than two labels.

    Ports are stripped; IP literals never yield a tenant.
    """
    if not host:
        return None
    host = host.strip().lower()
    if host.startswith("["):
        return None
    host = host.split(":")[0].rstrip(".")
    try:
        ipaddress.ip_address(host)
        return None
    except ValueError:
        pass

    parts = host.split(".")
    if len(parts) > 2 and parts[0]:
        return parts[0]
    return None


class TenantResolver:
    """Resolves a single tenant id for a request or fails."""

    def __init__(
        self,
        header_name: str = DEFAULT_TENANT_HEADER,
        allowed_tenants: Optional[Iterable[str]] = None,
        reserved_names: Iterable[str] = RESERVED_TENANT_NAMES,
        custom_resolver: Optional[TenantResolverFunc] = None,
        owner_override: Optional[OwnerOverride] = None,
    ):
        self.header_name = header_name.lower()
        self.allowed_tenants = (
            frozenset(str(t).strip() for t in allowed_tenants)
            if allowed_tenants is not None else None
        )
        self.reserved_names = frozenset(n.lower() for n in reserved_names)
        self.custom_resolver = custom_resolver
        self.owner_override = owner_override

    @classmethod
    def from_settings(
        cls,
        settings,
        custom_resolver: Optional[TenantResolverFunc] = None,
        owner_override: Optional[OwnerOverride] = None,
    ) -> "TenantResolver":
        return cls(
            header_name=settings.tenant_header,
            allowed_tenants=settings.allowed_tenants,
            reserved_names=settings.reserved_tenant_names,
            custom_resolver=custom_resolver,
            owner_override=owner_override or OwnerOverride.from_settings(settings),
        )

    async def resolve(self, request: TenantRequest) -> TenantContext:
        """Resolve the tenant for ``request``.

        Raises:
            TenantResolutionError: the custom resolver raised
            InvalidTenantHeaderError: the header carries a reserved name
            TenantNotAllowedError: the tenant is outside the allow-list
            TenantMissingError: no source yielded a tenant
        """
        tenant_id, source = await self._extract(request)

        if tenant_id is None:
            logger.bind(event="TENANT_MISSING", path=request.path, ip=request.client_ip).warning(
                f"No tenant context for {request.method} {request.path}"
            )
            raise TenantMissingError("Tenant context required.")

        principal = request.principal
        if self.owner_override is not None and self.owner_override.applies(tenant_id, principal):
            context = TenantContext(
                tenant_id=tenant_id,
                source=source,
                is_owner_override=True,
                path=request.path,
                client_ip=request.client_ip,
            )
            self.owner_override.record_use(context, principal)
            return context

        if self.allowed_tenants is not None and tenant_id not in self.allowed_tenants:
            logger.bind(
                event="TENANT_NOT_ALLOWED",
                tenant_id=tenant_id,
                path=request.path,
                ip=request.client_ip,
            ).warning(f"Tenant {tenant_id} is not allowed")
            raise TenantNotAllowedError(
                "Tenant not allowed.",
                details={"tenant_id": tenant_id},
            )

        context = TenantContext(
            tenant_id=tenant_id,
            source=source,
            path=request.path,
            client_ip=request.client_ip,
        )
        logger.bind(event="TENANT_RESOLVED", **context.to_log_dict()).info(
            f"Tenant {tenant_id} resolved from {source.value}"
        )
        return context

    async def _extract(self, request: TenantRequest) -> Tuple[Optional[str], Optional[TenantSource]]:
        if self.custom_resolver is not None:
            try:
                result = self.custom_resolver(request)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                logger.bind(event="TENANT_RESOLVER_ERROR", path=request.path).error(
                    f"Custom tenant resolver failed: {e}"
                )
                raise TenantResolutionError("Tenant resolution failed.") from e
            tenant_id = _normalize(result)
            if tenant_id is not None:
                return tenant_id, TenantSource.CUSTOM

        principal = request.principal
        if principal is not None:
            tenant_id = _normalize(getattr(principal, "tenant_id", None))
            if tenant_id is not None:
                return tenant_id, TenantSource.CLAIM

        header_value = request.header(self.header_name)
        if isinstance(header_value, str) and header_value.strip():
            tenant_id = header_value.strip()
            if tenant_id.lower() in self.reserved_names:
                logger.bind(
                    event="TENANT_HEADER_INVALID",
                    path=request.path,
                    ip=request.client_ip,
                ).warning(f"Rejected reserved tenant header value {tenant_id!r}")
                raise InvalidTenantHeaderError("Invalid tenant header.")
            return tenant_id, TenantSource.HEADER

        subdomain = extract_subdomain(request.host)
        if subdomain is not None:
            return subdomain, TenantSource.SUBDOMAIN

        return None, None
