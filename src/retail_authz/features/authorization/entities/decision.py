"""Authorization verdicts."""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional


class MatchKind(str, Enum):
    """Which clause of a requirement let the principal through."""

    SHORTCUT = "shortcut"
    ROLE = "role"
    PERMISSION = "permission"
    RESOURCE = "resource"
    ACTION = "action"


@dataclass(frozen=True)
class Decision:
    """Allow or deny, with the reason and the clause that decided it."""

    allowed: bool
    reason: Optional[str] = None
    matched_by: Optional[MatchKind] = None
    shortcut_role: Optional[str] = None
    role_names: FrozenSet[str] = frozenset()
    strategy: Optional[str] = None

    @classmethod
    def allow(
        cls,
        matched_by: MatchKind,
        role_names: FrozenSet[str] = frozenset(),
        shortcut_role: Optional[str] = None,
        strategy: Optional[str] = None,
    ) -> "Decision":
        return cls(
            allowed=True,
            matched_by=matched_by,
            shortcut_role=shortcut_role,
            role_names=role_names,
            strategy=strategy,
        )

    @classmethod
    def deny(
        cls,
        reason: str,
        role_names: FrozenSet[str] = frozenset(),
        strategy: Optional[str] = None,
    ) -> "Decision":
        return cls(allowed=False, reason=reason, role_names=role_names, strategy=strategy)

    def __bool__(self) -> bool:
        return self.allowed
