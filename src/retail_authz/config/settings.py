"""
Settings for the retail authorization engine.

All values can be supplied through environment variables prefixed with
``AUTHZ_`` or through a ``.env`` file next to the service.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    AuthzStrategyName,
    CacheBackendName,
    CacheTTL,
    DEFAULT_EXEMPT_PATHS,
    DEFAULT_SHORTCUT_ROLES,
    DEFAULT_SUPER_TENANT_IDS,
    DEFAULT_TENANT_HEADER,
    RESERVED_TENANT_NAMES,
)


class AuthzSettings(BaseSettings):
    """Authorization engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: str = Field(default="development")

    # Decision point
    strategy: AuthzStrategyName = Field(default=AuthzStrategyName.HIERARCHICAL)
    shortcut_role_names: List[str] = Field(default_factory=lambda: list(DEFAULT_SHORTCUT_ROLES))
    enforce_assignment_validity: bool = Field(default=True)
    inherit_org_unit_assignments: bool = Field(default=False)

    # Tenant resolution
    tenant_header: str = Field(default=DEFAULT_TENANT_HEADER)
    allowed_tenants: Optional[List[str]] = Field(default=None)
    reserved_tenant_names: List[str] = Field(default_factory=lambda: list(RESERVED_TENANT_NAMES))
    owner_override_enabled: bool = Field(default=True)
    super_tenant_ids: List[str] = Field(default_factory=lambda: list(DEFAULT_SUPER_TENANT_IDS))
    exempt_paths: List[str] = Field(default_factory=lambda: list(DEFAULT_EXEMPT_PATHS))

    # Grant cache
    cache_backend: CacheBackendName = Field(default=CacheBackendName.MEMORY)
    redis_url: Optional[str] = Field(default=None)
    role_index_ttl: int = Field(default=CacheTTL.ROLE_INDEX, ge=0)
    grants_ttl: int = Field(default=CacheTTL.GRANTS, ge=0)
    shortcut_ttl: int = Field(default=CacheTTL.SHORTCUT_GRANTS, ge=0)

    # Database
    database_url: Optional[str] = Field(default=None)
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=5.0, gt=0)

    # Audit and error reporting
    audit_to_database: bool = Field(default=True)
    sentry_dsn: Optional[str] = Field(default=None)

    @field_validator("shortcut_role_names", "reserved_tenant_names")
    @classmethod
    def _lowercase_names(cls, value: List[str]) -> List[str]:
        return [str(v).strip().lower() for v in value]

    @field_validator("tenant_header")
    @classmethod
    def _lowercase_header(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("shortcut_ttl")
    @classmethod
    def _shortcut_ttl_is_shortest(cls, value: int, info) -> int:
        grants_ttl = info.data.get("grants_ttl")
        if grants_ttl is not None and value > grants_ttl:
            raise ValueError("shortcut_ttl must not exceed grants_ttl")
        return value


@lru_cache(maxsize=1)
def get_settings() -> AuthzSettings:
    """Get settings loaded from the environment."""
    return AuthzSettings()
