"""Infrastructure seams: FastAPI integration, middleware and error reporting."""

from .error_reporting import (
    ErrorReporter,
    LoggingErrorReporter,
    SentryErrorReporter,
    create_error_reporter,
)

__all__ = [
    "ErrorReporter",
    "LoggingErrorReporter",
    "SentryErrorReporter",
    "create_error_reporter",
]
