"""Unit tests for access checks and the admin reconcile endpoint."""
import pytest

from app.core.errors import PermissionDenied, Unauthenticated
from app.services.access.gate import AccessGate, StoreAccessGate, require_role, require_webhook_secret
from app.services.ingestion.paths import ORDERS, OUTBOX, kds_orders_collection

RECONCILE_URL = "/api/admin/outbox/reconcile"


class StaticAccessGate(AccessGate):
    """Gate resolving from a fixed uid -> role mapping."""

    def __init__(self, roles):
        self.roles = roles

    async def resolve_role(self, caller_uid):
        return self.roles.get(caller_uid)


class TestRequireWebhookSecret:
    """Test shared-secret comparison."""

    @pytest.mark.parametrize("configured", [None, ""])
    def test_unconfigured_secret_disables_check(self, configured):
        require_webhook_secret(None, configured)
        require_webhook_secret("anything", configured)

    @pytest.mark.parametrize("provided", [None, "", "wrong", "s3cret "])
    def test_mismatch(self, provided):
        with pytest.raises(PermissionDenied) as exc_info:
            require_webhook_secret(provided, "s3cret")
        assert exc_info.value.status_code == 403

    def test_match(self):
        require_webhook_secret("s3cret", "s3cret")


class TestRequireRole:
    """Test role checks through an injected gate."""

    @pytest.mark.asyncio
    async def test_no_caller(self):
        with pytest.raises(Unauthenticated) as exc_info:
            await require_role(StaticAccessGate({}), None, "super_admin")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_profile(self):
        with pytest.raises(PermissionDenied, match="User profile missing"):
            await require_role(StaticAccessGate({}), "ghost", "super_admin")

    @pytest.mark.asyncio
    async def test_wrong_role(self):
        with pytest.raises(PermissionDenied, match="super_admin privileges required"):
            await require_role(StaticAccessGate({"u1": "cashier"}), "u1", "super_admin")

    @pytest.mark.asyncio
    async def test_allowed(self):
        await require_role(StaticAccessGate({"u1": "super_admin"}), "u1", "super_admin")

    @pytest.mark.asyncio
    async def test_store_gate_reads_role_name(self, memory_store):
        gate = StoreAccessGate(memory_store)

        assert await gate.resolve_role("admin-uid") == "super_admin"
        assert await gate.resolve_role("cashier-uid") == "cashier"
        assert await gate.resolve_role("ghost") is None
        assert await gate.resolve_role("admin-uid/..") is None


class TestReconcileEndpoint:
    """Test the admin reconcile endpoint."""

    def test_requires_caller(self, test_client):
        response = test_client.post(RECONCILE_URL)

        assert response.status_code == 401
        assert response.json()["ok"] is False

    def test_requires_super_admin(self, test_client):
        response = test_client.post(RECONCILE_URL, headers={"X-Caller-Uid": "cashier-uid"})

        assert response.status_code == 403
        assert response.json() == {"ok": False, "error": "super_admin privileges required."}

    @pytest.mark.asyncio
    async def test_reconciles_pending_records(self, test_client, memory_store):
        order = {"id": "o-1", "restaurant_id": "R1", "items": []}
        ticket = {"order_id": "o-1", "restaurant_id": "R1", "items": []}
        await memory_store.set(OUTBOX, "o-1", {"order": order, "ticket": ticket, "created_at": "2026-01-01T00:00:00+00:00"})

        response = test_client.post(RECONCILE_URL, headers={"X-Caller-Uid": "admin-uid"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "reconciled": 1}
        assert await memory_store.get(ORDERS, "o-1") == order
        assert await memory_store.get(kds_orders_collection("R1"), "o-1") == ticket
        assert await memory_store.list(OUTBOX) == []
