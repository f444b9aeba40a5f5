"""Infrastructure exceptions for retail-authz."""

from .base import RetailAuthzError


class DatabaseError(RetailAuthzError):
    """Raised when the persistence layer fails."""
    pass


class CacheError(RetailAuthzError):
    """Raised when a cache backend fails."""
    pass


class ConfigurationError(RetailAuthzError):
    """Raised when settings are missing or inconsistent."""
    pass
