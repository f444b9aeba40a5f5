"""Audit event entity.

One event is recorded per protected operation, whatever its outcome. The
context is sanitised on construction so secrets never reach a sink.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ....config.constants import AuditOutcome
from ....utils.datetime import utc_now
from ....utils.sanitization import sanitize_context
from ....utils.uuid import generate_uuid_v7


@dataclass(frozen=True)
class AuditEvent:
    """Record of one authorization outcome or protected action."""

    action: str
    outcome: AuditOutcome
    tenant_id: Optional[str] = None
    user_id: Optional[str] = None
    resource: Optional[str] = None
    resource_id: Optional[str] = None
    reason: Optional[str] = None
    matched_by: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    context: Mapping[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=generate_uuid_v7)
    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        object.__setattr__(self, 'outcome', AuditOutcome(self.outcome))
        object.__setattr__(self, 'context', MappingProxyType(sanitize_context(self.context)))
        if self.resource_id is not None:
            object.__setattr__(self, 'resource_id', str(self.resource_id))
        if self.user_agent is not None:
            object.__setattr__(self, 'user_agent', self.user_agent[:256])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "occurred_at": self.occurred_at.isoformat(),
            "tenant_id": self.tenant_id,
            "user_id": self.user_id,
            "action": self.action,
            "resource": self.resource,
            "resource_id": self.resource_id,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "matched_by": self.matched_by,
            "ip": self.ip,
            "user_agent": self.user_agent,
            "context": dict(self.context),
        }
