"""Integration tests for the receiving endpoints via TestClient."""

import json

from stockroom.ledger.queries import get_sku


class TestReceiveScanEndpoint:
    def test_merge_into_existing_sku(self, client, add_sku):
        water = add_sku(name="Bottled Water 500ml", stock=4, price=900, external_code="880003")

        response = client.post(
            "/receiving/scans",
            json={"productName": "Water", "barcode": "880003", "quantity": 6, "expireDate": "2025-09-30"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["outcome"] == "merged"
        assert data["sku"]["id"] == water.id
        assert data["sku"]["stock"] == 10
        assert data["event"]["external_code"] == "880003"
        assert get_sku(water.id).stock == 10

    def test_envelope_with_json_string(self, client):
        scan = {"productName": "Kimbap", "barcode": "990001", "quantity": "4", "price": "2500"}
        response = client.post("/receiving/scans", json={"data": json.dumps(scan)})

        assert response.status_code == 201
        data = response.json()
        assert data["outcome"] == "created"
        assert data["sku"]["name"] == "Kimbap"
        assert data["sku"]["stock"] == 4
        assert data["sku"]["price"] == 2500

    def test_untracked_scan(self, client):
        response = client.post("/receiving/scans", json={"productName": "Loose Fruit", "quantity": 2})
        assert response.status_code == 201
        data = response.json()
        assert data["outcome"] == "untracked"
        assert data["sku"] is None

    def test_missing_product_name(self, client):
        response = client.post("/receiving/scans", json={"barcode": "880003", "quantity": 1})
        assert response.status_code == 400
        assert "productName" in response.json()["details"]["messages"]

    def test_non_object_body(self, client):
        response = client.post("/receiving/scans", json=["not", "an", "object"])
        assert response.status_code == 400


class TestScanHistoryEndpoint:
    def test_newest_first_with_limit(self, client):
        for name in ("First", "Second", "Third"):
            client.post("/receiving/scans", json={"productName": name, "quantity": 1})

        names = [event["product_name"] for event in client.get("/receiving/scans").json()]
        assert names == ["Third", "Second", "First"]

        limited = client.get("/receiving/scans", params={"limit": 2}).json()
        assert [event["product_name"] for event in limited] == ["Third", "Second"]

    def test_invalid_limit(self, client):
        assert client.get("/receiving/scans", params={"limit": 0}).status_code == 400
