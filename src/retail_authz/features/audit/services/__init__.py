"""Audit services."""

from .audit_emitter import AuditEmitter
from .logging_sink import LoggingAuditSink

__all__ = ["AuditEmitter", "LoggingAuditSink"]
