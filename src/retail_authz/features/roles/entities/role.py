"""Role domain entities for retail-authz roles feature.

Roles are tenant-scoped and form a forest through ``parent_role_id``. A role
inherits, at query time, every permission granted to its ancestors. User
assignments optionally carry an org unit scope and a validity window.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ....utils.datetime import ensure_utc


@dataclass(frozen=True)
class Role:
    """Tenant-scoped role, optionally pointing at a parent role in the same tenant."""

    id: int
    name: str
    tenant_id: str
    parent_role_id: Optional[int] = None

    def __post_init__(self):
        if not self.name or not str(self.name).strip():
            raise ValueError("Role name cannot be empty")
        object.__setattr__(self, 'tenant_id', str(self.tenant_id))

    @property
    def normalized_name(self) -> str:
        """Lower-cased name used for all comparisons."""
        return self.name.strip().lower()

    @property
    def is_root(self) -> bool:
        return self.parent_role_id is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tenant_id": self.tenant_id,
            "parent_role_id": self.parent_role_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Role":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            tenant_id=str(data["tenant_id"]),
            parent_role_id=data.get("parent_role_id"),
        )

    def __str__(self) -> str:
        return f"Role({self.name})"


@dataclass(frozen=True)
class UserRole:
    """Assignment of a role to a user, optionally scoped to an org unit and time window."""

    user_id: str
    role_id: int
    tenant_id: str
    org_unit_id: Optional[int] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'user_id', str(self.user_id))
        object.__setattr__(self, 'tenant_id', str(self.tenant_id))
        if (
            self.valid_from is not None
            and self.valid_to is not None
            and ensure_utc(self.valid_to) <= ensure_utc(self.valid_from)
        ):
            raise ValueError("Assignment valid_to must be after valid_from")

    def is_effective_at(self, moment: datetime) -> bool:
        """Check whether the validity window contains ``moment``.

        Open bounds are unbounded; ``valid_to`` is exclusive.
        """
        moment = ensure_utc(moment)
        if self.valid_from is not None and moment < ensure_utc(self.valid_from):
            return False
        if self.valid_to is not None and moment >= ensure_utc(self.valid_to):
            return False
        return True
