"""Org Unit Graph Store: per-tenant organizational hierarchy and memberships."""

from .entities import OrgUnit, OrgUnitRepository, UserOrgUnit
from .repositories import AsyncPGOrgUnitRepository
from .services import OrgUnitService

__all__ = [
    "OrgUnit",
    "OrgUnitRepository",
    "UserOrgUnit",
    "AsyncPGOrgUnitRepository",
    "OrgUnitService",
]
