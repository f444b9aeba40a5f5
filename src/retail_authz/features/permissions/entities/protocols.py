"""Protocol interfaces for the permission catalog."""

from abc import abstractmethod
from typing import List, Optional, Protocol, Sequence, Set, runtime_checkable

from .permission import Permission


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for permission catalog data access."""

    @abstractmethod
    async def list_for_tenant(self, tenant_id: str) -> List[Permission]:
        """List a tenant's permission catalog."""
        ...

    @abstractmethod
    async def names_for_roles(self, role_ids: Sequence[int], tenant_id: str) -> Set[str]:
        """Distinct lower-cased permission names granted directly to any of the roles."""
        ...

    @abstractmethod
    async def create(
        self,
        name: str,
        tenant_id: str,
        resource: Optional[str] = None,
        action: Optional[str] = None,
        description: Optional[str] = None
    ) -> Permission:
        """Create a permission."""
        ...

    @abstractmethod
    async def grant(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        """Grant a permission to a role. Returns False when nothing was inserted."""
        ...

    @abstractmethod
    async def revoke(self, role_id: int, permission_id: int, tenant_id: str) -> bool:
        """Remove a direct grant. Returns True when a row was removed."""
        ...
