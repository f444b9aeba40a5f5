"""Configuration module for retail-authz."""

from .constants import (
    AuditOutcome,
    AuthzStrategyName,
    CacheBackendName,
    CacheKeys,
    CacheTTL,
    TenantSource,
)
from .settings import AuthzSettings, get_settings
from .logging_config import (
    LogFormat,
    LoggingConfig,
    LogVerbosity,
    get_logger,
    setup_logging,
)

__all__ = [
    "AuditOutcome",
    "AuthzStrategyName",
    "CacheBackendName",
    "CacheKeys",
    "CacheTTL",
    "TenantSource",
    "AuthzSettings",
    "get_settings",
    "LogFormat",
    "LoggingConfig",
    "LogVerbosity",
    "get_logger",
    "setup_logging",
]
