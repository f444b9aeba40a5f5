"""Cache feature: pluggable backends and the tenant-scoped grant cache."""

from typing import Optional

from .adapters import MemoryCacheAdapter, RedisCacheAdapter
from .entities import CacheBackend
from .services import GrantCache
from ...config.constants import CacheBackendName
from ...core.exceptions import ConfigurationError


def create_cache_backend(settings) -> Optional[CacheBackend]:
    """Build the backend named by ``settings.cache_backend``."""
    name = CacheBackendName(settings.cache_backend)
    if name == CacheBackendName.NONE:
        return None
    if name == CacheBackendName.MEMORY:
        return MemoryCacheAdapter()
    if not settings.redis_url:
        raise ConfigurationError("AUTHZ_REDIS_URL is required for the redis cache backend")
    return RedisCacheAdapter.from_url(settings.redis_url)


__all__ = [
    "CacheBackend",
    "GrantCache",
    "MemoryCacheAdapter",
    "RedisCacheAdapter",
    "create_cache_backend",
]
