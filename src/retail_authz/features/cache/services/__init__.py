"""Cache services."""

from .grant_cache import GrantCache

__all__ = ["GrantCache"]
