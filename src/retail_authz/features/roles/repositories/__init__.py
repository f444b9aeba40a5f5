"""Role repositories."""

from .role_repository import AsyncPGRoleRepository, AsyncPGUserRoleRepository

__all__ = ["AsyncPGRoleRepository", "AsyncPGUserRoleRepository"]
