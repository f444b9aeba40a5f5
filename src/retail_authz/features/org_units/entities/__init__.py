"""Org unit entities and protocols."""

from .org_unit import OrgUnit, UserOrgUnit
from .protocols import OrgUnitRepository

__all__ = ["OrgUnit", "UserOrgUnit", "OrgUnitRepository"]
