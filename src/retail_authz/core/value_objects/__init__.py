"""Value objects shared across features."""

from .identifiers import UserId

__all__ = ["UserId"]
