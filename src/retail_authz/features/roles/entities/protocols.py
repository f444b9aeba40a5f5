"""Protocol interfaces for the role graph store."""

from abc import abstractmethod
from datetime import datetime
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from .role import Role, UserRole


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role data access operations."""

    @abstractmethod
    async def list_for_tenant(self, tenant_id: str) -> List[Role]:
        """List every role of a tenant (the role index)."""
        ...

    @abstractmethod
    async def create(self, name: str, tenant_id: str, parent_role_id: Optional[int] = None) -> Role:
        """Create a role."""
        ...

    @abstractmethod
    async def set_parent(self, role_id: int, parent_role_id: Optional[int], tenant_id: str) -> Optional[Role]:
        """Re-parent a role. Returns None when the role does not exist in the tenant."""
        ...


@runtime_checkable
class UserRoleRepository(Protocol):
    """Protocol for user role assignment data access."""

    @abstractmethod
    async def list_for_user(
        self,
        user_id: str,
        tenant_id: str,
        org_unit_ids: Optional[Sequence[int]] = None
    ) -> List[UserRole]:
        """List a user's assignments in a tenant, optionally limited to org units."""
        ...

    @abstractmethod
    async def assign(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None,
        valid_from: Optional[datetime] = None,
        valid_to: Optional[datetime] = None
    ) -> UserRole:
        """Assign a role to a user."""
        ...

    @abstractmethod
    async def revoke(
        self,
        user_id: str,
        role_id: int,
        tenant_id: str,
        org_unit_id: Optional[int] = None
    ) -> bool:
        """Delete an assignment. Returns True when a row was removed."""
        ...
