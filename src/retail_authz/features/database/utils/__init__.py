"""Database utilities: SQL statements and driver error translation."""

from .error_handling import DRIVER_ERRORS, database_error_handler

__all__ = ["DRIVER_ERRORS", "database_error_handler"]
