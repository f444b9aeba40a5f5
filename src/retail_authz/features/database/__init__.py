"""Database feature: pooled asyncpg access for the authorization stores."""

from .services.database_service import DatabaseService
from .utils.error_handling import database_error_handler

__all__ = ["DatabaseService", "database_error_handler"]
