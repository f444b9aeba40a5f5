"""Tests for error reporters."""

from unittest.mock import MagicMock, patch

from retail_authz.config.settings import AuthzSettings
from retail_authz.core.exceptions import InternalAuthzError
from retail_authz.infrastructure.error_reporting import (
    LoggingErrorReporter,
    SentryErrorReporter,
    create_error_reporter,
)

from fakes import RecordingErrorReporter


class TestSentryErrorReporter:

    def test_disabled_without_dsn(self):
        fallback = RecordingErrorReporter()
        with patch("retail_authz.infrastructure.error_reporting.sentry_sdk") as sentry:
            reporter = SentryErrorReporter(dsn=None, fallback=fallback)
            reporter.report(InternalAuthzError("x"), {"tenant_id": "5"})

        sentry.init.assert_not_called()
        sentry.capture_exception.assert_not_called()
        assert len(fallback.reports) == 1

    def test_reports_with_tenant_tag_and_sanitised_context(self):
        fallback = RecordingErrorReporter()
        error = InternalAuthzError("Authorization data is unavailable")
        with patch("retail_authz.infrastructure.error_reporting.sentry_sdk") as sentry:
            scope = MagicMock()
            sentry.new_scope.return_value.__enter__.return_value = scope
            reporter = SentryErrorReporter(dsn="https://key@sentry.example/1", environment="test", fallback=fallback)
            reporter.report(error, {"tenant_id": "5", "authorization": "Bearer abc"})

        sentry.init.assert_called_once()
        assert sentry.init.call_args.kwargs["send_default_pii"] is False
        scope.set_tag.assert_any_call("tenant_id", "5")
        scope.set_tag.assert_any_call("error_code", "InternalAuthzError")
        scope.set_context.assert_called_once_with("authz", {"tenant_id": "5", "authorization": "[REDACTED]"})
        sentry.capture_exception.assert_called_once_with(error)
        assert fallback.reports[0][1]["authorization"] == "[REDACTED]"


class TestCreateErrorReporter:

    def test_logging_without_dsn(self):
        reporter = create_error_reporter(AuthzSettings(_env_file=None, sentry_dsn=None))

        assert isinstance(reporter, LoggingErrorReporter)

    def test_logging_reporter_does_not_raise(self):
        LoggingErrorReporter().report(InternalAuthzError("x"), {"tenant_id": "5", "password": "p"})
