"""Authorization entities."""

from .context import AuthzContext
from .decision import Decision, MatchKind
from .grants import GrantView
from .operation import Operation, normalize_path
from .principal import Principal
from .requirement import Requirement, normalize_action_key

__all__ = [
    "AuthzContext",
    "Decision",
    "MatchKind",
    "GrantView",
    "Operation",
    "normalize_path",
    "Principal",
    "Requirement",
    "normalize_action_key",
]
