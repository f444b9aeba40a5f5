"""Org unit services."""

from .org_unit_service import OrgUnitService

__all__ = ["OrgUnitService"]
