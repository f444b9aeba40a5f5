"""Utilities module for retail-authz."""

from .datetime import ensure_utc, utc_now
from .sanitization import is_sensitive_key, sanitize_context
from .uuid import generate_uuid_v7

__all__ = [
    "ensure_utc",
    "utc_now",
    "is_sensitive_key",
    "sanitize_context",
    "generate_uuid_v7",
]
