"""Cache entities."""

from .protocols import CacheBackend

__all__ = ["CacheBackend"]
