"""Authenticated principal entity.

The principal is attached by an external authentication layer before any
authorization runs. It is immutable, so downstream handlers cannot forge
elevated claims after a decision.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, Mapping, Optional

from ....core.value_objects import UserId


def _normalize_names(names: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not names:
        return frozenset()
    if isinstance(names, str):
        names = [names]
    return frozenset(str(n).strip().lower() for n in names if str(n).strip())


@dataclass(frozen=True)
class Principal:
    """An authenticated actor making a request."""

    id: str
    tenant_id: Optional[str] = None
    base_role: Optional[str] = None
    org_unit_id: Optional[int] = None
    permissions: FrozenSet[str] = frozenset()
    claims: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'id', UserId.coerce(self.id).value)
        if self.tenant_id is not None:
            tenant_id = str(self.tenant_id).strip()
            object.__setattr__(self, 'tenant_id', tenant_id or None)
        if self.base_role is not None:
            object.__setattr__(self, 'base_role', str(self.base_role).strip().lower() or None)
        object.__setattr__(self, 'permissions', _normalize_names(self.permissions))
        object.__setattr__(self, 'claims', MappingProxyType(dict(self.claims)))

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        """Build a principal from verified token claims."""
        user_id = claims.get("sub") or claims.get("id") or claims.get("user_id")
        if user_id is None:
            raise ValueError("Claims carry no subject")
        tenant_id = claims.get("tenant_id", claims.get("tenantId"))
        org_unit_id = claims.get("org_unit_id", claims.get("orgUnitId"))
        return cls(
            id=user_id,
            tenant_id=None if tenant_id is None else str(tenant_id),
            base_role=claims.get("role"),
            org_unit_id=None if org_unit_id is None else int(org_unit_id),
            permissions=claims.get("permissions") or (),
            claims=claims,
        )

    def __repr__(self) -> str:
        # Claims are left out so tokens never reach logs through repr
        return f"Principal(id={self.id!r}, tenant_id={self.tenant_id!r}, base_role={self.base_role!r})"
