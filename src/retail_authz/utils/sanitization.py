"""Redaction of request context before it is logged, audited or reported."""

from typing import Any, Dict, Mapping, Optional

from ..config.constants import (
    DROPPED_CONTEXT_KEYS,
    MAX_CONTEXT_VALUE_LENGTH,
    REDACTED,
    SENSITIVE_KEY_FRAGMENTS,
)

_MAX_DEPTH = 4


def is_sensitive_key(key: str) -> bool:
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def _truncate(value: str) -> str:
    if len(value) <= MAX_CONTEXT_VALUE_LENGTH:
        return value
    return value[:MAX_CONTEXT_VALUE_LENGTH] + "...[truncated]"


def _clean(value: Any, depth: int) -> Any:
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _truncate(value)
    if depth >= _MAX_DEPTH:
        return "[nested]"
    if isinstance(value, Mapping):
        return sanitize_context(value, _depth=depth + 1)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_clean(item, depth + 1) for item in value]
    return _truncate(str(value))


def sanitize_context(context: Optional[Mapping[str, Any]], _depth: int = 0) -> Dict[str, Any]:
    """
    Copy of ``context`` safe to persist.

    Secret-looking keys are redacted, request bodies are dropped and long
    values are truncated. The input is never modified.
    """
    if not context:
        return {}

    cleaned: Dict[str, Any] = {}
    for key, value in context.items():
        key = str(key)
        if key.lower() in DROPPED_CONTEXT_KEYS:
            continue
        if is_sensitive_key(key):
            cleaned[key] = REDACTED
            continue
        cleaned[key] = _clean(value, _depth)
    return cleaned
