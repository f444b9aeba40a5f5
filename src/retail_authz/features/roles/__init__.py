"""Role Graph Store: tenant-scoped roles, their parent forest and user assignments."""

from .entities import Role, RoleRepository, UserRole, UserRoleRepository
from .repositories import AsyncPGRoleRepository, AsyncPGUserRoleRepository
from .services import RoleGraphService

__all__ = [
    "Role",
    "RoleRepository",
    "UserRole",
    "UserRoleRepository",
    "AsyncPGRoleRepository",
    "AsyncPGUserRoleRepository",
    "RoleGraphService",
]
