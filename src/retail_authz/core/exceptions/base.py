"""Base exceptions for retail-authz.

This module defines the base exception hierarchy for the authorization
engine. All exceptions inherit from RetailAuthzError and include error codes,
details, and HTTP status code mappings for API responses.
"""

from typing import Any, Dict, Optional


class RetailAuthzError(Exception):
    """Base exception for all retail-authz errors.

    All exceptions in the library inherit from this base class and include
    structured error information for better debugging and API responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as get_mapped_status_code
    return get_mapped_status_code(exception)


def create_error_response(exception: RetailAuthzError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Server-side failures never echo their message or details to the caller;
    those go to the error reporter instead.

    Args:
        exception: The retail-authz exception

    Returns:
        Error response dictionary
    """
    status_code = get_http_status_code(exception)
    if status_code >= 500:
        return {
            "error": {
                "code": exception.error_code,
                "message": "Internal server error (authorization)",
                "details": {},
                "type": exception.__class__.__name__,
            }
        }

    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
