"""Integration tests for the ledger FastAPI endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ledger.api import register_exception_handlers, routers
from ledger.lot.lot import InventoryEntry
from protean.utils.globals import current_domain


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def headers(owner_id):
    return {"X-Owner-Id": owner_id}


@pytest.fixture()
def item_id(client, headers):
    response = client.post("/items", json={"name": "Magic Egg"}, headers=headers)
    assert response.status_code == 201
    return response.json()["item_id"]


def _add_lot(client, headers, item_id, **overrides):
    body = {"item_id": item_id, "quantity": 200, "unit_cost": "1.5", "currency_unit": "WL"}
    body.update(overrides)
    return client.post("/lots", json=body, headers=headers)


class TestOwnerHeader:
    def test_missing_owner_is_rejected(self, client):
        assert client.get("/items").status_code == 422


class TestCategoryEndpoints:
    def test_create_and_list(self, client, headers):
        response = client.post("/categories", json={"name": "Eggs"}, headers=headers)
        assert response.status_code == 201

        names = [c["name"] for c in client.get("/categories", headers=headers).json()]
        assert names == ["Other", "Eggs"]

    def test_protected_default_returns_403(self, client, headers):
        other = client.get("/categories", headers=headers).json()[0]
        response = client.delete(f"/categories/{other['category_id']}", headers=headers)
        assert response.status_code == 403

    def test_duplicate_returns_422(self, client, headers):
        client.post("/categories", json={"name": "Eggs"}, headers=headers)
        response = client.post("/categories", json={"name": "EGGS"}, headers=headers)
        assert response.status_code == 422
        assert "name" in response.json()["errors"]


class TestLotEndpoints:
    def test_add_and_list(self, client, headers, item_id):
        response = _add_lot(client, headers, item_id)
        assert response.status_code == 201
        lot_id = response.json()["lot_id"]
        assert current_domain.repository_for(InventoryEntry).get(lot_id).quantity_bought == 200

        lots = client.get(f"/items/{item_id}/lots", headers=headers).json()
        assert lots[0]["unit_cost"] == "1.5"
        assert lots[0]["status"] == "OPEN"

    def test_fractional_quantity_is_rejected(self, client, headers, item_id):
        assert _add_lot(client, headers, item_id, quantity=1.5).status_code == 422

    def test_update_and_delete(self, client, headers, item_id):
        lot_id = _add_lot(client, headers, item_id).json()["lot_id"]
        assert client.put(f"/lots/{lot_id}", json={"quantity": 30}, headers=headers).status_code == 200
        assert client.get(f"/items/{item_id}/totals", headers=headers).json()["purchased_qty"] == 30
        assert client.delete(f"/lots/{lot_id}", headers=headers).status_code == 200
        assert client.get(f"/items/{item_id}/lots", headers=headers).json() == []

    def test_unknown_lot_returns_404(self, client, headers):
        assert client.delete("/lots/missing", headers=headers).status_code == 404


class TestSaleEndpoints:
    def test_record_and_list(self, client, headers, item_id):
        _add_lot(client, headers, item_id)
        response = client.post(
            "/sales",
            json={"item_id": item_id, "quantity": 100, "amount_gained": "200", "currency_unit": "WL"},
            headers=headers,
        )
        assert response.status_code == 201

        (sale,) = client.get("/sales", params={"item_id": item_id}, headers=headers).json()
        assert float(sale["total_cost"]) == 150
        assert float(sale["profit"]) == 50
        assert sale["cost_breakdown"][0]["lot_id"] == "lifetime-average"

    def test_insufficient_stock_returns_409(self, client, headers, item_id):
        _add_lot(client, headers, item_id, quantity=5)
        response = client.post(
            "/sales",
            json={"item_id": item_id, "quantity": 6, "amount_gained": "10"},
            headers=headers,
        )
        assert response.status_code == 409
        assert response.json()["available"] == 5

    def test_currency_mismatch_has_null_profit(self, client, headers, item_id):
        _add_lot(client, headers, item_id, currency_unit="DL")
        client.post(
            "/sales",
            json={"item_id": item_id, "quantity": 1, "amount_gained": "3", "currency_unit": "WL"},
            headers=headers,
        )
        (sale,) = client.get("/sales", headers=headers).json()
        assert sale["profit"] is None


class TestReadEndpoints:
    def test_simulation(self, client, headers, item_id):
        _add_lot(client, headers, item_id)
        response = client.post(
            f"/items/{item_id}/simulation",
            json={"quantity": 100, "sell_unit_price": "2.0"},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert float(data["simulated_cogs"]) == 150
        assert float(data["projected_profit"]) == 50
        assert data["insufficient"] is False

    def test_simulation_insufficient_is_not_an_error(self, client, headers, item_id):
        _add_lot(client, headers, item_id, quantity=5)
        response = client.post(
            f"/items/{item_id}/simulation",
            json={"quantity": 6, "sell_unit_price": "1"},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["insufficient"] is True
        assert response.json()["available"] == 5

    def test_available_items_and_reports(self, client, headers, item_id):
        _add_lot(client, headers, item_id, quantity=3)
        assert [i["name"] for i in client.get("/items/available", headers=headers).json()] == ["Magic Egg"]
        assert client.get("/reports/low-stock", headers=headers).json()[0]["remaining_qty"] == 3
        assert client.get("/reports/items", headers=headers).status_code == 200
        assert client.get("/reports/categories", headers=headers).status_code == 200

    def test_dashboard_summary(self, client, headers, item_id):
        _add_lot(client, headers, item_id, quantity=10, unit_cost="2")
        client.post(
            "/sales",
            json={"item_id": item_id, "quantity": 2, "amount_gained": "10", "currency_unit": "WL"},
            headers=headers,
        )

        response = client.get("/reports/summary", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["open_lots"] == 1
        assert [(v["currency_unit"], float(v["amount"])) for v in body["inventory_value"]] == [("WL", 16.0)]
        assert float(body["figures"][0]["profit"]) == 6
        assert body["top_items"][0]["item_name"] == "Magic Egg"
        assert len(body["recent_sales"]) == 1

    def test_profit_summary(self, client, headers, item_id):
        _add_lot(client, headers, item_id, quantity=10, unit_cost="1")
        response = client.get(f"/items/{item_id}/profit-summary", headers=headers)
        assert float(response.json()["profit"]) == -10


class TestCsvEndpoints:
    def test_template_and_import(self, client, headers):
        template = client.get("/csv/templates/lots", headers=headers)
        assert template.status_code == 200
        assert template.text.startswith("item_name,category,quantity")

        response = client.post("/csv/lots", json={"content": template.text}, headers=headers)
        assert response.json()["imported"] == 1

        exported = client.get("/csv/lots", headers=headers).text
        assert "Example Item" in exported

    def test_unknown_template(self, client, headers):
        assert client.get("/csv/templates/other", headers=headers).status_code == 404
