"""AsyncPG-based audit log repository."""

import json
import logging

from ..entities import AuditEvent
from ...database.services.database_service import DatabaseService
from ...database.utils import queries
from ...database.utils.error_handling import database_error_handler

logger = logging.getLogger(__name__)


class AsyncPGAuditRepository:
    """Appends audit events to the ``audit_log`` table."""

    def __init__(self, database: DatabaseService):
        self.database = database

    @database_error_handler("write audit event", log_level=logging.WARNING)
    async def write(self, event: AuditEvent) -> None:
        details = dict(event.context)
        if event.matched_by:
            details["matched_by"] = event.matched_by

        async with self.database.get_connection() as conn:
            await conn.execute(
                queries.AUDIT_LOG_INSERT,
                event.event_id,
                event.tenant_id,
                event.user_id,
                event.action,
                event.resource,
                event.resource_id,
                event.outcome.value,
                event.reason,
                json.dumps(details, default=str),
                event.ip,
                event.user_agent,
                event.occurred_at,
            )
