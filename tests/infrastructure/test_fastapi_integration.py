"""End-to-end tests of route protection in a FastAPI application."""

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, HTTPException

from retail_authz import AuthzContext, AuthzComponents, get_authz_context, require
from retail_authz.core.exceptions import RequirementDeclarationError
from retail_authz.features.audit import AuditEmitter
from retail_authz.features.authorization import Principal
from retail_authz.features.permissions import PermissionRegistry
from retail_authz.features.tenancy import OwnerOverride, TenantResolver

from fakes import RecordingAuditSink

RETAIL_TENANT = "5"

PRINCIPALS = {
    "manager": Principal(id="u1", tenant_id=RETAIL_TENANT, base_role="manager"),
    "cashier": Principal(id="u2", tenant_id=RETAIL_TENANT, base_role="cashier"),
    "owner-no-claim": Principal(id="u9", base_role="owner"),
    "no-tenant": Principal(id="u7"),
}


def build_app(components: AuthzComponents, tenant_middleware: bool = True) -> FastAPI:
    app = FastAPI()
    components.install(app, tenant_middleware=tenant_middleware)

    @app.middleware("http")
    async def attach_principal(request, call_next):
        token = request.headers.get("authorization", "").replace("Bearer ", "").strip()
        if token in PRINCIPALS:
            request.state.principal = PRINCIPALS[token]
        return await call_next(request)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/inventory")
    async def inventory(context: AuthzContext = Depends(require(permissions=["inventory:view"]))):
        return {"tenant_id": context.tenant_id, "matched_by": context.decision.matched_by.value}

    @app.get("/api/inventory/{sku}", dependencies=[Depends(require(permissions=["inventory:view"]))])
    async def inventory_item(sku: str):
        raise HTTPException(status_code=404, detail=f"Unknown SKU {sku}")

    @app.post(
        "/api/sales/{sale_id}/refund",
        dependencies=[Depends(require(
            permissions=["sale:refund"],
            resource="sale",
            resource_id_param="sale_id",
            deny_message="Only managers may refund",
            deny_status=404,
        ))],
    )
    async def refund(sale_id: int, context: AuthzContext = Depends(get_authz_context)):
        return {"refunded": sale_id, "user_id": context.user_id}

    return app


@pytest.fixture
def audit_sink():
    return RecordingAuditSink()


@pytest.fixture
def components(settings, decision_point, error_reporter, audit_sink):
    return AuthzComponents(
        settings=settings,
        decision_point=decision_point,
        tenant_resolver=TenantResolver(owner_override=OwnerOverride()),
        audit_emitter=AuditEmitter([audit_sink]),
        error_reporter=error_reporter,
        registry=PermissionRegistry.default(),
    )


@pytest_asyncio.fixture
async def client(components, retail_roles):
    transport = httpx.ASGITransport(app=build_app(components))
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


def _auth(token, **headers):
    return {"Authorization": f"Bearer {token}", **headers}


class TestProtectedRoutes:

    @pytest.mark.asyncio
    async def test_allow(self, client, components, audit_sink):
        response = await client.get("/api/inventory", headers=_auth("manager"))
        await components.audit_emitter.drain()

        assert response.status_code == 200
        assert response.json() == {"tenant_id": RETAIL_TENANT, "matched_by": "permission"}
        assert audit_sink.outcomes() == ["allow"]
        assert audit_sink.events[0].action == "GET /api/inventory"
        assert audit_sink.events[0].matched_by == "permission"

    @pytest.mark.asyncio
    async def test_deny(self, client, components, audit_sink):
        response = await client.get("/api/inventory", headers=_auth("cashier"))
        await components.audit_emitter.drain()

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Forbidden: Insufficient role or permission"
        assert audit_sink.outcomes() == ["deny"]
        assert audit_sink.events[0].reason == "insufficient permissions"

    @pytest.mark.asyncio
    async def test_custom_deny_message_and_status(self, client, components, audit_sink):
        response = await client.post("/api/sales/9/refund", headers=_auth("cashier"))
        await components.audit_emitter.drain()

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Only managers may refund"
        assert audit_sink.events[0].resource == "sale"
        assert audit_sink.events[0].resource_id == "9"

    @pytest.mark.asyncio
    async def test_unauthenticated(self, client, components, audit_sink):
        response = await client.get("/api/inventory", headers={"x-tenant-id": RETAIL_TENANT})
        await components.audit_emitter.drain()

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert audit_sink.outcomes() == ["deny"]
        assert audit_sink.events[0].reason == "unauthenticated"

    @pytest.mark.asyncio
    async def test_reserved_tenant_header(self, client, components, audit_sink, store):
        response = await client.get(
            "/api/inventory", headers=_auth("no-tenant", **{"x-tenant-id": "__proto__"})
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid tenant header."
        await components.audit_emitter.drain()

        assert store.calls["load user role assignments"] == 0
        assert audit_sink.outcomes() == ["deny"]
        assert audit_sink.events[0].reason == "InvalidTenantHeaderError"
        assert audit_sink.events[0].user_id == "u7"

    @pytest.mark.asyncio
    async def test_missing_tenant(self, client):
        response = await client.get("/api/inventory", headers=_auth("no-tenant"))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Tenant context required."

    @pytest.mark.asyncio
    async def test_exempt_path_skips_tenant_resolution(self, client):
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_owner_of_one_tenant_denied_in_another(self, client):
        response = await client.get(
            "/api/inventory", headers=_auth("owner-no-claim", **{"x-tenant-id": "6"})
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_database_down_is_a_500_not_a_403(
        self, client, components, audit_sink, store, error_reporter
    ):
        store.failing = True

        response = await client.get("/api/inventory", headers=_auth("manager"))
        await components.audit_emitter.drain()

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Internal server error (authorization)"
        assert audit_sink.outcomes() == ["error"]
        assert len(error_reporter.reports) == 1

    @pytest.mark.asyncio
    async def test_allowed_handler_sees_sealed_context(self, store, client):
        refunder = store.add_role("refunder", RETAIL_TENANT)
        store.grant(refunder, "sale:refund")
        store.assign("u1", refunder)

        response = await client.post("/api/sales/9/refund", headers=_auth("manager"))

        assert response.status_code == 200
        assert response.json() == {"refunded": 9, "user_id": "u1"}

    @pytest.mark.asyncio
    async def test_allow_is_audited_when_handler_raises(self, client, components, audit_sink):
        response = await client.get("/api/inventory/SKU-404", headers=_auth("manager"))
        await components.audit_emitter.drain()

        assert response.status_code == 404
        assert audit_sink.outcomes() == ["allow"]
        assert audit_sink.events[0].action == "GET /api/inventory/{sku}"
        assert audit_sink.events[0].context["handler_error"] == "HTTPException"


class TestTenantResolvedInDependency:

    @pytest_asyncio.fixture
    async def client(self, components, retail_roles):
        transport = httpx.ASGITransport(app=build_app(components, tenant_middleware=False))
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client

    @pytest.mark.asyncio
    async def test_allow(self, client, components, audit_sink):
        response = await client.get("/api/inventory", headers=_auth("manager"))
        await components.audit_emitter.drain()

        assert response.status_code == 200
        assert audit_sink.outcomes() == ["allow"]

    @pytest.mark.asyncio
    async def test_rejected_tenant_header_is_audited(self, client, components, audit_sink):
        response = await client.get(
            "/api/inventory", headers=_auth("no-tenant", **{"x-tenant-id": "__proto__"})
        )
        await components.audit_emitter.drain()

        assert response.status_code == 400
        assert audit_sink.outcomes() == ["deny"]
        assert audit_sink.events[0].reason == "InvalidTenantHeaderError"
        assert audit_sink.events[0].user_id == "u7"
        assert audit_sink.events[0].tenant_id is None

    @pytest.mark.asyncio
    async def test_missing_tenant_is_audited(self, client, components, audit_sink):
        response = await client.get("/api/inventory", headers=_auth("no-tenant"))
        await components.audit_emitter.drain()

        assert response.status_code == 400
        assert audit_sink.outcomes() == ["deny"]
        assert audit_sink.events[0].reason == "TenantMissingError"


class TestRouteDeclaration:

    def test_unknown_permission_fails_when_route_is_declared(self):
        with pytest.raises(RequirementDeclarationError):
            require(permissions=["inventory:veiw"])

    def test_validation_can_use_a_custom_registry(self):
        registry = PermissionRegistry(["loyalty:enroll"])

        dependency = require(permissions=["loyalty:enroll"], registry=registry)

        assert dependency.requirement.permissions == {"loyalty:enroll"}
