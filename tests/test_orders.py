"""
Tests for the order endpoints
"""

import pytest
from fastapi.testclient import TestClient

from foodtruck.core.clock import from_iso
from foodtruck.core.config import Settings, get_settings
from foodtruck.main import app
from foodtruck.services.orders import OrderService, get_order_service
from foodtruck.services.storage import UnconfiguredOrderStore

MISSING_ID = 999999999


class TestCreateOrder:
    """Placing orders"""

    def test_create_order_round_trip(self, client, sample_order):
        """A new order shows up in the list as pending"""
        response = client.post("/api/orders", json=sample_order)
        assert response.status_code == 201

        created = response.json()
        assert isinstance(created["id"], int)
        assert created["status"] == "pending"
        assert created["total"] == 8.5

        orders = client.get("/api/orders").json()
        match = [o for o in orders if o["id"] == created["id"]]
        assert len(match) == 1
        assert match[0]["status"] == "pending"
        assert match[0]["total"] == 8.5
        assert match[0]["items"] == [{"name": "Taco", "qty": 2}]

    def test_create_order_applies_defaults(self, client):
        """An empty body still produces a complete order"""
        response = client.post("/api/orders", json={})
        assert response.status_code == 201

        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["type"] == "eat"
        assert data["customerName"] == ""
        assert data["customerPhone"] == ""
        assert data["status"] == "pending"
        assert "createdAt" in data
        assert "updatedAt" not in data

    def test_create_order_ignores_server_fields(self, client):
        """Clients cannot pick the id, status or creation time"""
        response = client.post(
            "/api/orders",
            json={"id": 42, "status": "completed", "createdAt": "2000-01-01T00:00:00Z"},
        )
        data = response.json()

        assert data["id"] != 42
        assert data["status"] == "pending"
        assert not data["createdAt"].startswith("2000")

    def test_create_order_keeps_extra_fields(self, client):
        """Unknown keys from the customer page are stored as sent"""
        response = client.post(
            "/api/orders",
            json={"type": "togo", "notes": "no cilantro", "timestamp": "12:41 PM"},
        )
        data = response.json()

        assert data["type"] == "togo"
        assert data["notes"] == "no cilantro"
        assert data["timestamp"] == "12:41 PM"

        stored = client.get(f"/api/orders/{data['id']}").json()
        assert stored["notes"] == "no cilantro"

    def test_create_order_rejects_non_object_body(self, client):
        response = client.post("/api/orders", json=[1, 2, 3])
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_create_order_without_body(self, client):
        """A bare POST places an order made of defaults"""
        response = client.post("/api/orders")
        assert response.status_code == 201

        data = response.json()
        assert data["status"] == "pending"
        assert data["items"] == []
        assert data["type"] == "eat"

    def test_create_order_keeps_total_as_sent(self, client):
        """Totals are stored without coercion"""
        response = client.post("/api/orders", json={"total": 10})
        assert response.status_code == 201
        assert response.json()["total"] == 10
        assert isinstance(response.json()["total"], int)

        response = client.post("/api/orders", json={"total": None})
        assert response.status_code == 201

    def test_ids_increase(self, client):
        first = client.post("/api/orders", json={"customerName": "A"}).json()
        second = client.post("/api/orders", json={"customerName": "B"}).json()
        assert second["id"] > first["id"]


class TestGetOrder:
    """Reading orders"""

    def test_get_order_success(self, client, sample_order):
        order_id = client.post("/api/orders", json=sample_order).json()["id"]

        response = client.get(f"/api/orders/{order_id}")
        assert response.status_code == 200
        assert response.json()["customerName"] == "Ana"

    def test_list_orders_empty(self, client):
        response = client.get("/api/orders")
        assert response.status_code == 200
        assert response.json() == []

    def test_malformed_id_is_unknown_route(self, client):
        response = client.get("/api/orders/abc")
        assert response.status_code == 404

        data = response.json()
        assert data["error"] == "Not found"
        assert data["path"] == "/api/orders/abc"
        assert data["method"] == "GET"


class TestNotFound:
    """Single-order routes with an unknown id"""

    @pytest.mark.parametrize("method", ["get", "patch", "delete"])
    def test_missing_order_returns_404(self, client, method):
        kwargs = {"json": {"status": "ready"}} if method == "patch" else {}

        response = getattr(client, method)(f"/api/orders/{MISSING_ID}", **kwargs)

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found"


class TestUpdateOrder:
    """Kitchen status changes"""

    def test_update_status_leaves_other_fields(self, client, sample_order):
        created = client.post("/api/orders", json=sample_order).json()

        response = client.patch(f"/api/orders/{created['id']}", json={"status": "ready"})
        assert response.status_code == 200

        updated = response.json()
        assert updated["status"] == "ready"
        for field in ("id", "items", "total", "type", "customerName", "customerPhone", "createdAt"):
            assert updated[field] == created[field]
        assert from_iso(updated["updatedAt"]) > from_iso(updated["createdAt"])

        assert client.get(f"/api/orders/{created['id']}").json() == updated

    def test_update_cannot_change_id_or_created_at(self, client, sample_order):
        created = client.post("/api/orders", json=sample_order).json()

        response = client.patch(
            f"/api/orders/{created['id']}",
            json={"id": 1, "createdAt": "2000-01-01T00:00:00Z", "status": "preparing"},
        )
        updated = response.json()

        assert updated["id"] == created["id"]
        assert updated["createdAt"] == created["createdAt"]
        assert updated["status"] == "preparing"

    def test_update_accepts_any_status(self, client, sample_order):
        created = client.post("/api/orders", json=sample_order).json()

        response = client.patch(f"/api/orders/{created['id']}", json={"status": "on-hold"})
        assert response.status_code == 200
        assert response.json()["status"] == "on-hold"

    def test_completed_order_can_be_reopened(self, client, sample_order):
        order_id = client.post("/api/orders", json=sample_order).json()["id"]
        client.patch(f"/api/orders/{order_id}", json={"status": "completed"})

        response = client.patch(f"/api/orders/{order_id}", json={"status": "pending"})
        assert response.json()["status"] == "pending"

    def test_update_accepts_long_status(self, client, sample_order):
        order_id = client.post("/api/orders", json=sample_order).json()["id"]

        response = client.patch(f"/api/orders/{order_id}", json={"status": "x" * 200})
        assert response.status_code == 200
        assert response.json()["status"] == "x" * 200

    def test_update_without_body_stamps_updated_at(self, client, sample_order):
        created = client.post("/api/orders", json=sample_order).json()

        response = client.patch(f"/api/orders/{created['id']}")
        assert response.status_code == 200

        updated = response.json()
        assert updated["status"] == "pending"
        assert "updatedAt" in updated

    def test_update_rejects_empty_status(self, client, sample_order):
        order_id = client.post("/api/orders", json=sample_order).json()["id"]

        response = client.patch(f"/api/orders/{order_id}", json={"status": ""})
        assert response.status_code == 400
        assert "error" in response.json()


class TestDeleteOrders:
    """Deleting and clearing"""

    def test_delete_order(self, client, sample_order):
        keep = client.post("/api/orders", json=sample_order).json()
        drop = client.post("/api/orders", json=sample_order).json()
        before = len(client.get("/api/orders").json())

        response = client.delete(f"/api/orders/{drop['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Order deleted successfully"}

        orders = client.get("/api/orders").json()
        assert len(orders) == before - 1
        assert drop["id"] not in [o["id"] for o in orders]
        assert keep["id"] in [o["id"] for o in orders]

    def test_clear_is_idempotent(self, client, sample_order):
        client.post("/api/orders", json=sample_order)

        for _ in range(2):
            response = client.delete("/api/orders")
            assert response.status_code == 200
            assert response.json() == {"message": "All orders cleared successfully"}

        assert client.get("/api/orders").json() == []


class TestUnknownRoutes:

    def test_unknown_path_echoes_request(self, client):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "path": "/api/unknown", "method": "GET"}

    def test_unsupported_method_is_not_found(self, client):
        response = client.put("/api/orders", json={})
        assert response.status_code == 404
        assert response.json()["method"] == "PUT"


class TestStoreFailures:
    """Store errors degrade reads and fail writes"""

    def test_read_failure_degrades_to_empty_list(self, client, store, sample_order):
        client.post("/api/orders", json=sample_order)
        store.fail_reads = True

        response = client.get("/api/orders")
        assert response.status_code == 200
        assert response.json() == []

    def test_read_failure_on_get_is_not_found(self, client, store, sample_order):
        order_id = client.post("/api/orders", json=sample_order).json()["id"]
        store.fail_reads = True

        assert client.get(f"/api/orders/{order_id}").status_code == 404

    def test_read_failure_blocks_create(self, client, store, sample_order):
        client.post("/api/orders", json=sample_order)
        store.fail_reads = True

        response = client.post("/api/orders", json=sample_order)
        assert response.status_code == 500

        store.fail_reads = False
        assert len(client.get("/api/orders").json()) == 1

    def test_write_failures(self, client, store, sample_order):
        order_id = client.post("/api/orders", json=sample_order).json()["id"]
        store.fail_writes = True

        create = client.post("/api/orders", json=sample_order)
        assert create.status_code == 500
        assert create.json() == {"error": "Failed to save order"}

        update = client.patch(f"/api/orders/{order_id}", json={"status": "ready"})
        assert update.status_code == 500
        assert update.json()["error"] == "Failed to update order"

        delete = client.delete(f"/api/orders/{order_id}")
        assert delete.status_code == 500
        assert delete.json()["error"] == "Failed to delete order"

        clear = client.delete("/api/orders")
        assert clear.status_code == 500
        assert clear.json()["error"] == "Failed to clear orders"

    def test_unconfigured_store(self, sample_order):
        app.dependency_overrides[get_order_service] = lambda: OrderService(UnconfiguredOrderStore())
        try:
            client = TestClient(app)

            assert client.get("/api/orders").json() == []

            response = client.post("/api/orders", json=sample_order)
            assert response.status_code == 500
            assert response.json() == {
                "error": "Failed to save order",
                "message": "Order storage is not configured",
            }
        finally:
            app.dependency_overrides.clear()

    def test_unexpected_error_returns_500(self):
        class BrokenStore(UnconfiguredOrderStore):
            async def list_orders(self):
                raise RuntimeError("disk on fire")

        app.dependency_overrides[get_order_service] = lambda: OrderService(BrokenStore())
        try:
            client = TestClient(app, raise_server_exceptions=False)

            response = client.get("/api/orders")
            assert response.status_code == 500
            assert response.json()["error"] == "Internal server error"
        finally:
            app.dependency_overrides.clear()


class TestAdminToken:

    @pytest.fixture
    def guarded_client(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, admin_token="s3cret")
        return client

    def test_clear_requires_token(self, guarded_client):
        response = guarded_client.delete("/api/orders")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

        response = guarded_client.delete("/api/orders", headers={"X-Admin-Token": "nope"})
        assert response.status_code == 401

    def test_clear_with_token(self, guarded_client):
        response = guarded_client.delete("/api/orders", headers={"X-Admin-Token": "s3cret"})
        assert response.status_code == 200


def test_cors_preflight(client):
    response = client.options(
        "/api/orders/1",
        headers={
            "Origin": "http://kitchen.local",
            "Access-Control-Request-Method": "PATCH",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://kitchen.local")
    assert "PATCH" in response.headers["access-control-allow-methods"]


def test_plain_options_request(client):
    response = client.options("/api/orders")
    assert response.status_code == 200


def test_end_to_end_scenario(client):
    """Two orders placed, the first deleted, only the second remains"""
    a = client.post("/api/orders", json={"customerName": "A", "total": 5}).json()
    b = client.post("/api/orders", json={"customerName": "B", "total": 7}).json()
    assert b["id"] > a["id"]

    ids = [o["id"] for o in client.get("/api/orders").json()]
    assert ids == [a["id"], b["id"]]

    assert client.delete(f"/api/orders/{a['id']}").status_code == 200

    orders = client.get("/api/orders").json()
    assert [o["id"] for o in orders] == [b["id"]]
    assert orders[0]["customerName"] == "B"
