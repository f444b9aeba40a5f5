"""Standardized error handling utilities for database operations."""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, Optional

import asyncpg

from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Failures that mean "the store could not answer", as opposed to "the answer is empty".
DRIVER_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


def database_error_handler(
    operation_name: str,
    log_level: int = logging.ERROR,
    context_fields: Optional[Dict[str, str]] = None
):
    """Decorator translating driver failures into DatabaseError.

    Args:
        operation_name: Name of the operation for logging
        log_level: Logging level (default: ERROR)
        context_fields: Additional context fields for logging

    Usage:
        @database_error_handler("load role index")
        async def list_for_tenant(self, tenant_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except DatabaseError:
                raise
            except DRIVER_ERRORS as e:
                operation_context = {"operation": operation_name, "function": func.__name__}
                if context_fields:
                    operation_context.update(context_fields)
                if "tenant_id" in kwargs:
                    operation_context["tenant_id"] = str(kwargs["tenant_id"])
                context_str = ", ".join(f"{k}={v}" for k, v in operation_context.items())
                logger.log(log_level, f"Failed to {operation_name}: {e} | Context: {context_str}")
                raise DatabaseError(
                    f"Failed to {operation_name}",
                    details={"operation": operation_name, "cause": e.__class__.__name__},
                ) from e

        return wrapper
    return decorator
