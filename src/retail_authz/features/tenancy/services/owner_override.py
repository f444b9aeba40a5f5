"""
Super-tenant owner override.

Platform operators holding the ``owner`` base role may address a sentinel
tenant id that skips the tenant allow-list. It defeats tenant isolation, so it
lives here as one switchable code path and every use is logged distinctly.
It grants no permissions by itself.
"""

from typing import Iterable, Optional

from loguru import logger

from ..entities import TenantContext
from ....config.constants import DEFAULT_SUPER_TENANT_IDS, OWNER_BASE_ROLE


class OwnerOverride:
    """Decides and records use of the super-tenant escape hatch."""

    def __init__(
        self,
        enabled: bool = True,
        super_tenant_ids: Iterable[str] = DEFAULT_SUPER_TENANT_IDS,
        owner_role: str = OWNER_BASE_ROLE,
    ):
        self.enabled = enabled
        self.super_tenant_ids = frozenset(str(t).strip() for t in super_tenant_ids)
        self.owner_role = owner_role.lower()

    @classmethod
    def from_settings(cls, settings) -> "OwnerOverride":
        return cls(
            enabled=settings.owner_override_enabled,
            super_tenant_ids=settings.super_tenant_ids,
        )

    def applies(self, tenant_id: str, principal) -> bool:
        """Check whether the override covers this tenant id and principal."""
        if not self.enabled or principal is None:
            return False
        base_role = getattr(principal, "base_role", None)
        return (
            tenant_id in self.super_tenant_ids
            and base_role is not None
            and base_role.lower() == self.owner_role
        )

    def record_use(self, context: TenantContext, principal: Optional[object] = None) -> None:
        """Log a use of the override. Called on every use."""
        logger.bind(
            event="OWNER_OVERRIDE_USED",
            user_id=getattr(principal, "id", None),
            **context.to_log_dict(),
        ).warning(
            f"Owner override used for tenant {context.tenant_id} on {context.path}"
        )
