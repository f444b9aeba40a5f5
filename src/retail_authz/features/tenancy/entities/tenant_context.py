"""Tenant resolution inputs and the resolved, read-only tenant context."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from ....config.constants import TenantSource

if TYPE_CHECKING:
    from ...authorization.entities.principal import Principal


@dataclass(frozen=True)
class TenantRequest:
    """The parts of an incoming request that tenant resolution may read.

    Header names are lower-cased on construction.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    host: Optional[str] = None
    path: str = "/"
    method: str = "GET"
    client_ip: Optional[str] = None
    principal: Optional["Principal"] = None

    def __post_init__(self):
        normalized = {str(k).lower(): v for k, v in dict(self.headers).items()}
        object.__setattr__(self, 'headers', MappingProxyType(normalized))

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant identity for one request. Never mutated after resolution."""

    tenant_id: str
    source: TenantSource
    is_owner_override: bool = False
    path: Optional[str] = None
    client_ip: Optional[str] = None
    resolved_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_log_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "source": self.source.value,
            "is_owner_override": self.is_owner_override,
            "path": self.path,
            "ip": self.client_ip,
            "resolved_at": self.resolved_at.isoformat(),
        }
