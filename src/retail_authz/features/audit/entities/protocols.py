"""Protocol interfaces for audit sinks."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from .audit_event import AuditEvent


@runtime_checkable
class AuditSink(Protocol):
    """Destination for audit events."""

    @abstractmethod
    async def write(self, event: AuditEvent) -> None:
        """Persist or forward one event."""
        ...
