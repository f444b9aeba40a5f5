"""
Centralized error reporting sinks.

Infrastructure failures during authorization are forwarded here with a
sanitised context. ``SentryErrorReporter`` tags events with the tenant so
they can be filtered per tenant.
"""

from abc import abstractmethod
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import sentry_sdk
from loguru import logger

from ..utils.sanitization import sanitize_context


@runtime_checkable
class ErrorReporter(Protocol):
    """Destination for unexpected failures."""

    @abstractmethod
    def report(self, error: BaseException, context: Optional[Mapping[str, Any]] = None) -> None:
        ...


class LoggingErrorReporter:
    """Reports errors as loguru records with the traceback attached."""

    def report(self, error: BaseException, context: Optional[Mapping[str, Any]] = None) -> None:
        cleaned = sanitize_context(context)
        logger.bind(event="ERROR_REPORTED", error_type=error.__class__.__name__, **cleaned).opt(
            exception=error
        ).error(f"{error.__class__.__name__}: {error}")


class SentryErrorReporter:
    """Reports errors to Sentry, scoped with tenant and request context."""

    def __init__(
        self,
        dsn: Optional[str] = None,
        environment: Optional[str] = None,
        fallback: Optional[ErrorReporter] = None,
    ):
        self.enabled = bool(dsn)
        self.fallback = fallback or LoggingErrorReporter()
        if self.enabled:
            sentry_sdk.init(
                dsn=dsn,
                environment=environment,
                send_default_pii=False,
            )

    @classmethod
    def from_settings(cls, settings) -> "SentryErrorReporter":
        return cls(dsn=settings.sentry_dsn, environment=settings.environment)

    def report(self, error: BaseException, context: Optional[Mapping[str, Any]] = None) -> None:
        cleaned = sanitize_context(context)
        self.fallback.report(error, cleaned)
        if not self.enabled:
            return

        with sentry_sdk.new_scope() as scope:
            if cleaned.get("tenant_id"):
                scope.set_tag("tenant_id", str(cleaned["tenant_id"]))
            error_code = getattr(error, "error_code", None)
            if error_code:
                scope.set_tag("error_code", error_code)
            scope.set_context("authz", cleaned)
            sentry_sdk.capture_exception(error)


def create_error_reporter(settings) -> ErrorReporter:
    """Sentry when a DSN is configured, plain logging otherwise."""
    if settings.sentry_dsn:
        return SentryErrorReporter.from_settings(settings)
    return LoggingErrorReporter()
