"""
Tests for the cart API and the service endpoints
"""
from decimal import Decimal

from factories import LAMP, MUG, S1, S2


class TestCartApi:

    def test_requires_authentication(self, client, catalog):
        assert client.get("/api/v1/cart").status_code == 401

    def test_get_cart(self, client, catalog, auth_headers):
        response = client.get("/api/v1/cart", headers=auth_headers())

        assert response.status_code == 200
        lines = {line["productId"]: line for line in response.json()}
        assert set(lines) == {MUG, LAMP}
        assert lines[MUG]["storeId"] == S1
        assert Decimal(str(lines[LAMP]["unitPriceSnapshot"])) == Decimal("100.75")

    def test_delivery_options(self, client, catalog, auth_headers):
        response = client.get(
            "/api/v1/cart/delivery-options",
            params=[("storeIds", S1), ("storeIds", S2)],
            headers=auth_headers(),
        )

        assert response.status_code == 200
        data = response.json()
        assert data[str(S1)]["express"]["price"] == 80.0
        assert data[str(S1)]["express"]["etaDays"] == 1
        assert data[str(S2)]["standard"]["price"] == 0.0

    def test_delivery_options_leave_out_unknown_store(self, client, catalog, auth_headers):
        response = client.get(
            "/api/v1/cart/delivery-options",
            params=[("storeIds", S1), ("storeIds", 999)],
            headers=auth_headers(),
        )

        assert response.status_code == 200
        data = response.json()
        assert list(data) == [str(S1)]
        assert data[str(S1)]["standard"]["storeName"] == "Clay Corner"
        assert data[str(S1)]["standard"]["price"] == 50.0


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    def test_health_connected(self, client, monkeypatch):
        monkeypatch.setattr("marketplace.main.check_database_connection", lambda **kwargs: 1.5)

        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["database"] == {"status": "connected", "latency_ms": 1.5, "error": None}

    def test_health_degraded(self, client, monkeypatch):
        def unreachable(**kwargs):
            raise RuntimeError("connection refused")

        monkeypatch.setattr("marketplace.main.check_database_connection", unreachable)

        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["database"]["error"] == "connection refused"
