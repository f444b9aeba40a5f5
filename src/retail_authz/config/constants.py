"""Constants and enums for retail-authz.

This module defines the constants, enums, and default values shared by the
authorization engine. Values that operators may want to change at runtime
are mirrored as fields on ``AuthzSettings``; the ones here are the defaults.
"""

from enum import Enum
from typing import Final, FrozenSet, Tuple


class CacheKeys:
    """Cache key patterns for grant caching."""

    PREFIX: Final[str] = "authz"
    TENANT_PREFIX: Final[str] = "authz:{tenant_id}:"
    ROLE_INDEX: Final[str] = "authz:{tenant_id}:role_index"
    USER_GRANTS: Final[str] = "authz:{tenant_id}:grants:{user_id}:{org_unit_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    ROLE_INDEX: Final[int] = 60         # 1 minute
    GRANTS: Final[int] = 30             # 30 seconds
    SHORTCUT_GRANTS: Final[int] = 5     # privilege shortcuts go stale fastest


class AuthzStrategyName(str, Enum):
    """Decision point strategies selectable by configuration."""

    STATIC = "static"
    HIERARCHICAL = "hierarchical"


class CacheBackendName(str, Enum):
    """Grant cache backends."""

    NONE = "none"
    MEMORY = "memory"
    REDIS = "redis"


class TenantSource(str, Enum):
    """Where a request's tenant identifier came from."""

    CUSTOM = "custom"
    CLAIM = "claim"
    HEADER = "header"
    SUBDOMAIN = "subdomain"


class AuditOutcome(str, Enum):
    """Outcome recorded for a protected operation."""

    ALLOW = "allow"
    DENY = "deny"
    ERROR = "error"


# Tenant resolution
DEFAULT_TENANT_HEADER: Final[str] = "x-tenant-id"
RESERVED_TENANT_NAMES: Final[Tuple[str, ...]] = ("__proto__", "constructor", "prototype")
DEFAULT_SUPER_TENANT_IDS: Final[Tuple[str, ...]] = ("0000000000",)
OWNER_BASE_ROLE: Final[str] = "owner"

# Role names that bypass permission aggregation
DEFAULT_SHORTCUT_ROLES: Final[Tuple[str, ...]] = ("owner", "admin")

# Roles the static claims strategy always accepts
STATIC_ALWAYS_ALLOWED_ROLES: Final[Tuple[str, ...]] = ("owner",)

DEFAULT_DENY_MESSAGE: Final[str] = "Forbidden: Insufficient role or permission"
DEFAULT_DENY_STATUS: Final[int] = 403
INSUFFICIENT_PERMISSIONS: Final[str] = "insufficient permissions"

# Audit / error context redaction
SENSITIVE_KEY_FRAGMENTS: Final[FrozenSet[str]] = frozenset({
    "password",
    "passwd",
    "token",
    "secret",
    "authorization",
    "cookie",
    "api_key",
    "apikey",
    "x-api-key",
    "credential",
    "session",
})
DROPPED_CONTEXT_KEYS: Final[FrozenSet[str]] = frozenset({"body", "payload", "files"})
REDACTED: Final[str] = "[REDACTED]"
MAX_CONTEXT_VALUE_LENGTH: Final[int] = 256

DEFAULT_EXEMPT_PATHS: Final[Tuple[str, ...]] = ("/health", "/metrics", "/docs", "/openapi.json")
