"""Role entities and protocols."""

from .role import Role, UserRole
from .protocols import RoleRepository, UserRoleRepository

__all__ = ["Role", "UserRole", "RoleRepository", "UserRoleRepository"]
