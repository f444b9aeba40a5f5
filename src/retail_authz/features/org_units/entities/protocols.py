"""Protocol interfaces for the org unit graph store."""

from abc import abstractmethod
from typing import List, Protocol, runtime_checkable

from .org_unit import OrgUnit, UserOrgUnit


@runtime_checkable
class OrgUnitRepository(Protocol):
    """Protocol for org unit data access operations."""

    @abstractmethod
    async def list_for_tenant(self, tenant_id: str) -> List[OrgUnit]:
        """List every org unit of a tenant."""
        ...

    @abstractmethod
    async def list_memberships(self, user_id: str, tenant_id: str) -> List[UserOrgUnit]:
        """List a user's direct org unit memberships in a tenant."""
        ...
