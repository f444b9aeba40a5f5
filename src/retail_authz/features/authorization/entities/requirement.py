"""Declarative authorization requirements.

A requirement is satisfied when any of its clauses passes: a role name, a
permission name, a resource-scoped permission (only when the operation is
tagged with a resource) or an action-scoped permission keyed by
``METHOD:/path``.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Mapping, Optional

from .operation import normalize_path
from ....config.constants import DEFAULT_DENY_MESSAGE, DEFAULT_DENY_STATUS
from ....core.exceptions import RequirementDeclarationError

if TYPE_CHECKING:
    from ...permissions.registry import PermissionRegistry

_METHOD_RE = re.compile(r"^[A-Z]+$")


def _names(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(str(v).strip().lower() for v in values if str(v).strip())


def normalize_action_key(key: str) -> str:
    """Normalise ``method:/path`` to ``METHOD:/path`` without a trailing slash."""
    method, sep, path = str(key).strip().partition(":")
    method = method.strip().upper()
    path = path.strip()
    if not sep or not _METHOD_RE.match(method) or not path.startswith("/"):
        raise RequirementDeclarationError(
            f"Malformed action key {key!r}, expected 'METHOD:/path'",
            details={"action_key": key},
        )
    return f"{method}:{normalize_path(path)}"


@dataclass(frozen=True)
class Requirement:
    """Immutable protection declared by a route or operation."""

    roles: FrozenSet[str] = frozenset()
    permissions: FrozenSet[str] = frozenset()
    resource_permissions: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    action_permissions: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    deny_message: str = DEFAULT_DENY_MESSAGE
    deny_status: int = DEFAULT_DENY_STATUS

    def __post_init__(self):
        object.__setattr__(self, 'roles', _names(self.roles))
        object.__setattr__(self, 'permissions', _names(self.permissions))
        object.__setattr__(self, 'resource_permissions', MappingProxyType({
            str(resource).strip().lower(): _names(perms)
            for resource, perms in dict(self.resource_permissions or {}).items()
        }))
        object.__setattr__(self, 'action_permissions', MappingProxyType({
            normalize_action_key(key): _names(perms)
            for key, perms in dict(self.action_permissions or {}).items()
        }))

        if isinstance(self.deny_status, bool) or not isinstance(self.deny_status, int) \
                or not 400 <= self.deny_status <= 499:
            raise RequirementDeclarationError(
                f"Deny status must be a 4xx code, got {self.deny_status!r}",
                details={"deny_status": self.deny_status},
            )
        if not self.deny_message or not str(self.deny_message).strip():
            raise RequirementDeclarationError("Deny message cannot be empty")

    @property
    def permission_names(self) -> FrozenSet[str]:
        """Every permission name referenced by any clause."""
        names = set(self.permissions)
        for perms in self.resource_permissions.values():
            names.update(perms)
        for perms in self.action_permissions.values():
            names.update(perms)
        return frozenset(names)

    @property
    def is_empty(self) -> bool:
        return not (
            self.roles or self.permissions
            or self.resource_permissions or self.action_permissions
        )

    def validate(self, registry: "PermissionRegistry") -> "Requirement":
        """Fail on permission names the registry does not know."""
        unknown: List[str] = sorted(registry.unknown(self.permission_names))
        if unknown:
            raise RequirementDeclarationError(
                f"Unknown permission names: {', '.join(unknown)}",
                details={"unknown_permissions": unknown},
            )
        return self

    def __str__(self) -> str:
        parts = []
        if self.roles:
            parts.append(f"roles={sorted(self.roles)}")
        if self.permissions:
            parts.append(f"permissions={sorted(self.permissions)}")
        if self.resource_permissions:
            parts.append(f"resources={sorted(self.resource_permissions)}")
        if self.action_permissions:
            parts.append(f"actions={sorted(self.action_permissions)}")
        return f"Requirement({', '.join(parts) or 'shortcut only'})"
