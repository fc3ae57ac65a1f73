"""Integration tests for the replenishment worklist endpoints via TestClient."""

from stockroom.exceptions import UpstreamUnavailable
from stockroom.ledger.queries import get_sku
from stockroom.replenishment import get_worklist

OWNER = {"Authorization": "Bearer owner-token"}
STAFF = {"Authorization": "Bearer staff-token"}


class TestWorklistEndpoint:
    def test_lists_low_stock_requests(self, client, add_sku):
        low = add_sku(name="Cup Noodles", stock=1, external_code="880005")
        add_sku(name="Iced Americano", stock=40)

        response = client.get("/replenishment/worklist", headers=OWNER)

        assert response.status_code == 200
        data = response.json()
        assert data["degraded"] is False
        assert data["warning"] is None
        assert [(r["id"], r["status"]) for r in data["requests"]] == [(low.id, "pending")]
        assert {row["name"] for row in data["inventory"]} == {"Cup Noodles", "Iced Americano"}

    def test_staff_cannot_view(self, client):
        assert client.get("/replenishment/worklist", headers=STAFF).status_code == 403

    def test_anonymous_cannot_view(self, client):
        response = client.get("/replenishment/worklist")
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing bearer token"

    def test_degraded_when_ledger_is_unreachable(self, client, monkeypatch):
        def unreachable():
            raise UpstreamUnavailable("Stock ledger is unavailable")

        monkeypatch.setattr(get_worklist(), "inventory_source", unreachable)

        response = client.get("/replenishment/worklist", headers=OWNER)

        assert response.status_code == 200
        data = response.json()
        assert data["degraded"] is True
        assert "demo catalogue" in data["warning"]
        assert len(data["inventory"]) == 5


class TestDecisions:
    def test_approve_increments_stock(self, client, add_sku):
        low = add_sku(name="Cup Noodles", stock=1, external_code="880005")
        client.get("/replenishment/worklist", headers=OWNER)

        response = client.post(f"/replenishment/worklist/{low.id}/approve", json={"quantity": "12"}, headers=OWNER)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["approved_quantity"] == 12
        assert data["decided_by"] == "u-owner"
        assert get_sku(low.id).stock == 13

    def test_approve_with_invalid_quantity(self, client, add_sku):
        low = add_sku(name="Cup Noodles", stock=1, external_code="880005")
        client.get("/replenishment/worklist", headers=OWNER)

        response = client.post(f"/replenishment/worklist/{low.id}/approve", json={"quantity": "abc"}, headers=OWNER)

        assert response.status_code == 400
        assert "quantity" in response.json()["details"]["messages"]
        assert get_sku(low.id).stock == 1

    def test_second_decision_is_a_conflict(self, client, add_sku):
        low = add_sku(name="Cup Noodles", stock=1, external_code="880005")
        client.get("/replenishment/worklist", headers=OWNER)
        client.post(f"/replenishment/worklist/{low.id}/reject", headers=OWNER)

        response = client.post(f"/replenishment/worklist/{low.id}/approve", json={"quantity": 5}, headers=OWNER)
        assert response.status_code == 409
        assert get_sku(low.id).stock == 1

    def test_reject(self, client, add_sku):
        low = add_sku(name="Cup Noodles", stock=1, external_code="880005")
        client.get("/replenishment/worklist", headers=OWNER)

        response = client.post(f"/replenishment/worklist/{low.id}/reject", headers=OWNER)
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

        statuses = [r["status"] for r in client.get("/replenishment/worklist", headers=OWNER).json()["requests"]]
        assert statuses == ["rejected"]

    def test_unknown_request(self, client):
        response = client.post("/replenishment/worklist/missing/reject", headers=OWNER)
        assert response.status_code == 404

    def test_staff_cannot_approve(self, client, add_sku):
        low = add_sku(name="Cup Noodles", stock=1, external_code="880005")
        client.get("/replenishment/worklist", headers=OWNER)
        response = client.post(f"/replenishment/worklist/{low.id}/approve", json={"quantity": 5}, headers=STAFF)
        assert response.status_code == 403
        assert get_sku(low.id).stock == 1
