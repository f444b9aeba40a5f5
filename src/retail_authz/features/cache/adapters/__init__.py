"""Cache backend adapters."""

from .memory_adapter import MemoryCacheAdapter, MemoryCacheEntry
from .redis_adapter import RedisCacheAdapter

__all__ = ["MemoryCacheAdapter", "MemoryCacheEntry", "RedisCacheAdapter"]
