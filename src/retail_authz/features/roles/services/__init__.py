"""Role services."""

from .role_graph_service import RoleGraphService

__all__ = ["RoleGraphService"]
