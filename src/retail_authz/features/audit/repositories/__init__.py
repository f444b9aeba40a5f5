"""Audit repositories."""

from .audit_repository import AsyncPGAuditRepository

__all__ = ["AsyncPGAuditRepository"]
