"""Audit sink writing structured records through loguru."""

from loguru import logger

from ..entities import AuditEvent


class LoggingAuditSink:
    """Emits each audit event as a structured log record bound with ``audit=True``."""

    async def write(self, event: AuditEvent) -> None:
        logger.bind(audit=True, event="AUDIT_LOG", **event.to_dict()).info(
            f"{event.outcome.value.upper()} {event.action} "
            f"user={event.user_id} tenant={event.tenant_id}"
        )
