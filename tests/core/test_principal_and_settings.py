"""Tests for the principal entity, sanitisation helpers and settings."""

import pytest
from pydantic import ValidationError

from retail_authz.config.constants import AuthzStrategyName
from retail_authz.config.settings import AuthzSettings
from retail_authz.features.authorization import Principal
from retail_authz.utils.sanitization import is_sensitive_key, sanitize_context


class TestPrincipal:

    def test_from_claims(self):
        principal = Principal.from_claims({
            "sub": "u1",
            "tenantId": 5,
            "role": "Manager",
            "orgUnitId": "12",
            "permissions": ["Inventory:View"],
            "access_token": "secret",
        })

        assert principal.id == "u1"
        assert principal.tenant_id == "5"
        assert principal.base_role == "manager"
        assert principal.org_unit_id == 12
        assert principal.permissions == {"inventory:view"}

    def test_claims_without_subject(self):
        with pytest.raises(ValueError):
            Principal.from_claims({"tenant_id": "5"})

    def test_repr_omits_claims(self):
        principal = Principal(id="u1", claims={"access_token": "secret"})

        assert "secret" not in repr(principal)

    def test_is_immutable(self):
        principal = Principal(id="u1", base_role="cashier")

        with pytest.raises(AttributeError):
            principal.base_role = "owner"
        with pytest.raises(TypeError):
            principal.claims["role"] = "owner"


class TestSanitization:

    @pytest.mark.parametrize("key", ["password", "X-Api-Key", "refresh_token", "Cookie", "SESSION"])
    def test_sensitive_keys(self, key):
        assert is_sensitive_key(key)

    def test_input_is_not_modified(self):
        context = {"password": "hunter2", "path": "/api"}

        cleaned = sanitize_context(context)

        assert context["password"] == "hunter2"
        assert cleaned == {"password": "[REDACTED]", "path": "/api"}

    def test_deep_nesting_is_cut(self):
        context = {"a": {"b": {"c": {"d": {"e": {"f": 1}}}}}}

        assert sanitize_context(context)["a"]["b"]["c"]["d"]["e"] == "[nested]"


class TestAuthzSettings:

    def test_defaults(self):
        settings = AuthzSettings(_env_file=None)

        assert settings.strategy == AuthzStrategyName.HIERARCHICAL
        assert settings.enforce_assignment_validity
        assert not settings.inherit_org_unit_assignments
        assert settings.tenant_header == "x-tenant-id"
        assert settings.shortcut_role_names == ["owner", "admin"]
        assert settings.owner_override_enabled
        assert settings.super_tenant_ids == ["0000000000"]

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("AUTHZ_STRATEGY", "static")
        monkeypatch.setenv("AUTHZ_TENANT_HEADER", "X-Store-Tenant")

        settings = AuthzSettings(_env_file=None)

        assert settings.strategy == AuthzStrategyName.STATIC
        assert settings.tenant_header == "x-store-tenant"

    def test_shortcut_ttl_cannot_exceed_grants_ttl(self):
        with pytest.raises(ValidationError):
            AuthzSettings(_env_file=None, grants_ttl=10, shortcut_ttl=20)
