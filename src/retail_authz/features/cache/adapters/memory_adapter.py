"""Memory cache backend adapter for retail-authz."""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..entities.protocols import CacheBackend

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with metadata."""
    value: bytes
    created_at: float = field(default_factory=time.time)
    expires_at: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        """Check if entry is expired."""
        if self.expires_at is None:
            return False
        return time.time() >= self.expires_at

    @property
    def ttl(self) -> Optional[int]:
        """Get remaining TTL in seconds."""
        if self.expires_at is None:
            return None
        return max(0, int(self.expires_at - time.time()))


class MemoryCacheAdapter(CacheBackend):
    """In-process cache owned by the instance that created it.

    Values are stored serialised so callers never share mutable state with
    the cache. Expired entries are dropped lazily on read and on ``purge_expired``.
    """

    def __init__(self, max_entries: int = 10_000):
        self._store: Dict[str, MemoryCacheEntry] = {}
        self._max_entries = max_entries

    async def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired:
            self._store.pop(key, None)
            return None
        return json.loads(entry.value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            self._store.pop(key, None)
            return

        if key not in self._store and len(self._store) >= self._max_entries:
            self.purge_expired()
            if len(self._store) >= self._max_entries:
                # Evict the oldest entry
                oldest = min(self._store, key=lambda k: self._store[k].created_at)
                self._store.pop(oldest, None)
                logger.debug(f"Evicted cache entry {oldest}")

        self._store[key] = MemoryCacheEntry(
            value=json.dumps(value).encode("utf-8"),
            expires_at=time.time() + ttl,
        )

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def delete_prefix(self, prefix: str) -> int:
        keys = [key for key in self._store if key.startswith(prefix)]
        for key in keys:
            self._store.pop(key, None)
        return len(keys)

    async def close(self) -> None:
        self._store.clear()

    def purge_expired(self) -> int:
        """Drop expired entries. Returns the count removed."""
        expired = [key for key, entry in self._store.items() if entry.is_expired]
        for key in expired:
            self._store.pop(key, None)
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)
