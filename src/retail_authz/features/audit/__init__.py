"""Audit Emitter: non-blocking audit trail of authorization outcomes."""

from .entities import AuditEvent, AuditSink
from .repositories import AsyncPGAuditRepository
from .services import AuditEmitter, LoggingAuditSink

__all__ = [
    "AuditEvent",
    "AuditSink",
    "AsyncPGAuditRepository",
    "AuditEmitter",
    "LoggingAuditSink",
]
