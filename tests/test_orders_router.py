"""Tests for order endpoints (app/routers/orders.py)"""
from unittest.mock import patch

ORDER = {
    "name": "Ana", "number": "555-0101", "address": "Street 1", "product_name": "Mug",
    "total_product": 2, "total_price": 25.5, "sender_id": 1001, "recipient_id": "page",
}


def _create(client, **overrides):
    return client.post("/api/create-order", json={**ORDER, **overrides}).json()["data"]


class TestCreateOrder:
    def test_create_is_public(self, unauthenticated_client, db_session):
        from app.database import get_db
        from main import app

        client, _ = unauthenticated_client
        app.dependency_overrides[get_db] = lambda: db_session

        with patch("app.routers.orders.publish_event") as mock_publish:
            resp = client.post("/api/create-order", json=ORDER)

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["order_id"].startswith("ORD")
        assert data["status"] == "PENDING"
        assert data["sender_id"] == "1001"
        assert mock_publish.call_args[0][2]["webhook_type"] == "ORDER_CREATED"

    def test_missing_fields(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/create-order", json={"name": "Ana"})
        assert resp.status_code == 400
        assert "total_price" in resp.json()["missing_fields"]

    def test_invalid_quantity(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/create-order", json={**ORDER, "total_product": "zero"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"]["field"] == "total_product"


class TestOrderStatus:
    def test_cancel(self, sqlite_client):
        client, _ = sqlite_client
        order = _create(client)

        with patch("app.routers.orders.publish_event") as mock_publish:
            resp = client.put(
                f"/api/update-order-status/{order['order_id']}",
                json={"status": "cancelled", "reason": "no stock", "message": "Sorry"},
            )

        assert resp.status_code == 200
        assert resp.json()["message"] == "Order status updated to CANCELLED"
        assert resp.json()["data"]["cancel_reason"] == "no stock"
        change = mock_publish.call_args[0][2]["status_change"]
        assert change["from"] == "PENDING"
        assert change["to"] == "CANCELLED"

    def test_invalid_status(self, sqlite_client):
        client, _ = sqlite_client
        order = _create(client)
        resp = client.put(f"/api/update-order-status/{order['order_id']}", json={"status": "LOST"})
        assert resp.status_code == 400

    def test_unknown_order(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.put("/api/update-order-status/ORD0", json={"status": "CONFIRMED"})
        assert resp.status_code == 404


class TestOrderQueries:
    def test_listing_filters_and_stats(self, sqlite_client):
        client, _ = sqlite_client
        first = _create(client)
        _create(client, sender_id="2002")
        client.put(f"/api/update-order-status/{first['order_id']}", json={"status": "DELIVERED"})

        assert client.get("/api/all-orders").json()["count"] == 2
        assert client.get("/api/all-orders?status=delivered").json()["count"] == 1
        assert client.get("/api/orders?sender_id=2002").json()["count"] == 1
        assert client.get(f"/api/order/{first['order_id']}").json()["data"]["status"] == "DELIVERED"

        stats = client.get("/api/order-stats").json()["stats"]
        assert stats["totalOrders"] == 2
        assert stats["pendingOrders"] == 1
        assert stats["deliveredOrders"] == 1

    def test_order_not_found(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.get("/api/order/ORD404")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Order not found"
