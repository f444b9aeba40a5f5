"""The protected operation being authorized."""

from dataclasses import dataclass
from typing import Optional


def normalize_path(path: str) -> str:
    """Collapse a trailing slash; the root path stays ``/``."""
    path = (path or "/").strip()
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


@dataclass(frozen=True)
class Operation:
    """Method and path of a request, plus an optional resource tag.

    ``base_path`` is the mount prefix of the router serving the request. When
    absent, the parent of ``path`` is used for the action fallback.
    """

    method: str
    path: str
    base_path: Optional[str] = None
    resource: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'method', self.method.strip().upper())
        object.__setattr__(self, 'path', normalize_path(self.path))
        if self.base_path is not None:
            object.__setattr__(self, 'base_path', normalize_path(self.base_path))
        if self.resource is not None:
            object.__setattr__(self, 'resource', self.resource.strip().lower() or None)

    @property
    def action_key(self) -> str:
        return f"{self.method}:{self.path}"

    @property
    def base_action_key(self) -> Optional[str]:
        """``METHOD:BASE_PATH`` used when no exact action key is declared."""
        base = self.base_path
        if base is None:
            if self.path == "/":
                return None
            base = normalize_path(self.path.rsplit("/", 1)[0])
        return f"{self.method}:{base}"
