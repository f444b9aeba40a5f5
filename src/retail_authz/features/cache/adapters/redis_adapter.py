"""
Redis cache backend for grant caching.

Keys are namespaced per tenant by the caller; this adapter only stores JSON
values with SETEX and removes namespaces with SCAN.
"""
import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

from ..entities.protocols import CacheBackend
from ....core.exceptions import CacheError

logger = logging.getLogger(__name__)

REDIS_ERRORS = (redis.RedisError, OSError)


class RedisCacheAdapter(CacheBackend):
    """Redis implementation of the cache backend."""

    def __init__(self, redis_client: redis.Redis, scan_batch_size: int = 500):
        self._redis = redis_client
        self._scan_batch_size = scan_batch_size

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheAdapter":
        """Create an adapter with its own client for ``url``."""
        return cls(redis.from_url(url))

    async def get(self, key: str) -> Optional[Any]:
        try:
            result = await self._redis.get(key)
        except REDIS_ERRORS as e:
            raise CacheError(f"Failed to read cache key {key}: {e}") from e
        if result is None:
            return None
        if isinstance(result, bytes):
            result = result.decode("utf-8")
        return json.loads(result)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            if ttl <= 0:
                await self._redis.delete(key)
                return
            await self._redis.setex(key, ttl, json.dumps(value))
        except REDIS_ERRORS as e:
            raise CacheError(f"Failed to write cache key {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._redis.delete(key))
        except REDIS_ERRORS as e:
            raise CacheError(f"Failed to delete cache key {key}: {e}") from e

    async def delete_prefix(self, prefix: str) -> int:
        try:
            keys = [
                key async for key in self._redis.scan_iter(
                    match=f"{prefix}*", count=self._scan_batch_size
                )
            ]
            if not keys:
                return 0
            deleted = await self._redis.delete(*keys)
        except REDIS_ERRORS as e:
            raise CacheError(f"Failed to delete cache prefix {prefix}: {e}") from e

        logger.debug(f"Deleted {deleted} cache keys under {prefix}")
        return int(deleted)

    async def close(self) -> None:
        await self._redis.aclose()
