"""Value objects for identifiers in retail-authz.

User identifiers arrive from token claims as strings or integers; they are
normalised once here and compared by value everywhere else.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UserId:
    """User identifier value object with basic validation."""
    value: str

    def __post_init__(self):
        if self.value is None or isinstance(self.value, bool):
            raise ValueError("User ID must be a non-empty string")
        normalized = str(self.value).strip()
        if not normalized:
            raise ValueError("User ID must be a non-empty string")
        object.__setattr__(self, 'value', normalized)

    @classmethod
    def coerce(cls, value: Any) -> "UserId":
        """Build a UserId from a raw value or return it unchanged."""
        return value if isinstance(value, UserId) else cls(value)

    def __str__(self) -> str:
        return self.value
