"""Protocol interfaces for the grant cache backends."""

from abc import abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store with per-key expiry.

    Values are JSON-serialisable structures. Backends raise ``CacheError`` when
    the store cannot be reached; callers decide whether to fall through.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value, or None when missing or expired."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value for ``ttl`` seconds."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True when it existed."""
        ...

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``. Returns the count removed."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        ...
