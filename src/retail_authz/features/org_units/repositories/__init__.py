"""Org unit repositories."""

from .org_unit_repository import AsyncPGOrgUnitRepository

__all__ = ["AsyncPGOrgUnitRepository"]
