"""
Audit Emitter.

``record`` returns immediately: the write runs as a detached asyncio task,
independent of the request that produced it, and fans out to every sink.
Pending tasks are strongly referenced until they finish. ``drain`` waits for
them, for shutdown and tests.
"""

import asyncio
from typing import Any, Iterable, List, Mapping, Optional, Set

from loguru import logger

from ..entities import AuditEvent, AuditSink
from ....config.constants import AuditOutcome


class AuditEmitter:
    """Fire-and-forget audit recording."""

    def __init__(self, sinks: Optional[Iterable[AuditSink]] = None):
        self.sinks: List[AuditSink] = list(sinks or [])
        self._pending: Set[asyncio.Task] = set()

    def add_sink(self, sink: AuditSink) -> None:
        self.sinks.append(sink)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def record(
        self,
        principal,
        action: str,
        resource: Optional[str],
        outcome: AuditOutcome,
        resource_id: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        tenant_id: Optional[str] = None,
        reason: Optional[str] = None,
        matched_by: Optional[str] = None,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditEvent:
        """Build an event and schedule its write. Must be called from a running loop."""
        event = AuditEvent(
            action=action,
            outcome=outcome,
            tenant_id=tenant_id or getattr(principal, "tenant_id", None),
            user_id=getattr(principal, "id", None),
            resource=resource,
            resource_id=resource_id,
            reason=reason,
            matched_by=matched_by,
            ip=ip,
            user_agent=user_agent,
            context=context or {},
        )
        self.emit(event)
        return event

    def emit(self, event: AuditEvent) -> asyncio.Task:
        """Schedule the write of a prepared event."""
        task = asyncio.get_running_loop().create_task(self._write(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every pending write."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _write(self, event: AuditEvent) -> None:
        for sink in self.sinks:
            try:
                await sink.write(event)
            except Exception as e:
                logger.bind(event="AUDIT_WRITE_FAILED", audit_event_id=event.event_id).error(
                    f"Audit sink {sink.__class__.__name__} failed: {e}"
                )
