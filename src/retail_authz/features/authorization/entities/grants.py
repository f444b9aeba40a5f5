"""What a strategy knows about a principal within one tenant."""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional


@dataclass(frozen=True)
class GrantView:
    """Role names, permission names and an optional elevated-role shortcut."""

    tenant_id: str
    role_names: FrozenSet[str] = frozenset()
    permissions: FrozenSet[str] = frozenset()
    role_ids: FrozenSet[int] = frozenset()
    shortcut_role: Optional[str] = None

    @property
    def is_shortcut(self) -> bool:
        return self.shortcut_role is not None

    @classmethod
    def empty(cls, tenant_id: str) -> "GrantView":
        return cls(tenant_id=tenant_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "role_names": sorted(self.role_names),
            "permissions": sorted(self.permissions),
            "role_ids": sorted(self.role_ids),
            "shortcut_role": self.shortcut_role,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GrantView":
        return cls(
            tenant_id=str(data["tenant_id"]),
            role_names=frozenset(data.get("role_names", ())),
            permissions=frozenset(data.get("permissions", ())),
            role_ids=frozenset(int(i) for i in data.get("role_ids", ())),
            shortcut_role=data.get("shortcut_role"),
        )
