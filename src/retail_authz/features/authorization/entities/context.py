"""Typed authorization context threaded through one protected operation."""

from dataclasses import dataclass, replace
from typing import Optional

from .decision import Decision
from .operation import Operation
from .principal import Principal
from .requirement import Requirement
from ...tenancy.entities import TenantContext


@dataclass(frozen=True)
class AuthzContext:
    """Tenant, principal, operation and requirement of one decision.

    ``decision`` is filled in once by ``seal``; a sealed context is what
    handlers receive after an allow.
    """

    principal: Principal
    tenant: TenantContext
    requirement: Requirement
    operation: Optional[Operation] = None
    org_unit_id: Optional[int] = None
    decision: Optional[Decision] = None

    @property
    def tenant_id(self) -> str:
        return self.tenant.tenant_id

    @property
    def user_id(self) -> str:
        return self.principal.id

    @property
    def is_sealed(self) -> bool:
        return self.decision is not None

    def seal(self, decision: Decision) -> "AuthzContext":
        if self.decision is not None:
            raise ValueError("Authorization context is already sealed")
        return replace(self, decision=decision)
