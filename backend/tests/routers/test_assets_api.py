# backend/tests/routers/test_assets_api.py
"""
Integration tests for Asset API endpoints.

These tests verify full HTTP request/response cycles for:
- GET /assets/, /assets/search, /assets/code/{code}, /assets/{id}
- POST /assets/ and POST /assets/batch-update-prices (admin)
- PATCH /assets/{id} and DELETE /assets/{id} (admin)

Tests validate:
- Soft-deleted assets disappear from every read
- Codes stay reserved after a delete
- History arrays must be aligned
- Admin-only writes
"""

from decimal import Decimal

import pytest

from conftest import create_asset, get_auth_headers
from portfolio_tracker.models import Asset, AssetType


@pytest.fixture
def admin_headers(db, sample_admin):
    return get_auth_headers(db, sample_admin)


def asset_payload(**overrides) -> dict:
    payload = {
        "asset_code": "AAPL",
        "name": "Apple Inc.",
        "asset_type": "stock",
        "price": "150.25",
        "history_dates": ["2024-01-01", "2024-01-02"],
        "history_prices": ["148.00", "150.25"],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# READ
# =============================================================================

class TestListAssets:

    def test_list_excludes_deleted(self, client, db):
        create_asset(db, "AAPL")
        create_asset(db, "MSFT")
        create_asset(db, "GONE", is_deleted=True)

        response = client.get("/assets/")

        assert response.status_code == 200
        data = response.json()
        assert [a["asset_code"] for a in data["items"]] == ["AAPL", "MSFT"]
        assert data["pagination"]["total"] == 2
        assert data["pagination"]["limit"] == 100

    def test_pagination(self, client, db):
        for code in ("A", "B", "C"):
            create_asset(db, code)

        data = client.get("/assets/", params={"skip": 1, "limit": 1}).json()

        assert [a["asset_code"] for a in data["items"]] == ["B"]
        assert data["pagination"]["page"] == 2
        assert data["pagination"]["has_next"] is True
        assert data["pagination"]["has_previous"] is True


class TestSearchAssets:

    @pytest.fixture(autouse=True)
    def assets(self, db):
        create_asset(db, "AAPL", price="150", name="Apple Inc.")
        create_asset(db, "MSFT", price="300", name="Microsoft Corp.")
        create_asset(db, "Bond A", AssetType.BOND, price="100", name="US Treasury 10Y")
        create_asset(db, "EUBOND", AssetType.BOND, price="99", currency="EUR")

    def codes(self, response) -> list[str]:
        return [a["asset_code"] for a in response.json()["items"]]

    def test_by_type(self, client):
        assert self.codes(client.get("/assets/search", params={"asset_type": "bond"})) == [
            "Bond A", "EUBOND",
        ]

    def test_by_name_is_case_insensitive(self, client):
        assert self.codes(client.get("/assets/search", params={"name": "micro"})) == ["MSFT"]

    def test_by_code_substring(self, client):
        assert self.codes(client.get("/assets/search", params={"asset_code": "bond"})) == [
            "Bond A", "EUBOND",
        ]

    def test_by_price_range(self, client):
        response = client.get("/assets/search", params={"min_price": "100", "max_price": "150"})

        assert self.codes(response) == ["AAPL", "Bond A"]

    def test_by_currency(self, client):
        assert self.codes(client.get("/assets/search", params={"currency": "eur"})) == ["EUBOND"]

    def test_wildcards_match_literally(self, client):
        assert self.codes(client.get("/assets/search", params={"name": "%"})) == []

    def test_default_page_size(self, client):
        assert client.get("/assets/search").json()["pagination"]["limit"] == 10


class TestGetAsset:

    def test_by_id(self, client, db):
        asset = create_asset(db, "AAPL", history=[("2024-01-01", "148.5")])

        response = client.get(f"/assets/{asset.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["history_dates"] == ["2024-01-01"]
        assert Decimal(data["history_prices"][0]) == Decimal("148.5")

    def test_by_code(self, client, db):
        create_asset(db, "Bond A", AssetType.BOND)

        response = client.get("/assets/code/Bond A")

        assert response.status_code == 200
        assert response.json()["asset_type"] == "bond"

    def test_deleted_is_not_found(self, client, db):
        asset = create_asset(db, "GONE", is_deleted=True)

        assert client.get(f"/assets/{asset.id}").status_code == 404
        assert client.get("/assets/code/GONE").status_code == 404

    def test_missing(self, client):
        response = client.get("/assets/999")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"


# =============================================================================
# WRITE
# =============================================================================

class TestCreateAsset:

    def test_create(self, client, admin_headers):
        response = client.post("/assets/", json=asset_payload(), headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["asset_code"] == "AAPL"
        assert data["currency"] == "USD"
        assert Decimal(data["price"]) == Decimal("150.25")
        assert data["history_dates"] == ["2024-01-01", "2024-01-02"]

    def test_duplicate_code(self, client, db, admin_headers):
        create_asset(db, "AAPL")

        response = client.post("/assets/", json=asset_payload(), headers=admin_headers)

        assert response.status_code == 409

    def test_code_stays_reserved_after_delete(self, client, db, admin_headers):
        create_asset(db, "AAPL", is_deleted=True)

        response = client.post("/assets/", json=asset_payload(), headers=admin_headers)

        assert response.status_code == 409

    def test_misaligned_history(self, client, admin_headers):
        payload = asset_payload(history_prices=["1"])

        response = client.post("/assets/", json=payload, headers=admin_headers)

        assert response.status_code == 422

    def test_negative_price(self, client, admin_headers):
        response = client.post("/assets/", json=asset_payload(price="-1"), headers=admin_headers)

        assert response.status_code == 422

    def test_negative_history_price(self, client, admin_headers):
        payload = asset_payload(history_prices=["148.00", "-1"])

        response = client.post("/assets/", json=payload, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"

    def test_zero_history_price_allowed(self, client, admin_headers):
        payload = asset_payload(history_prices=["0", "150.25"])

        response = client.post("/assets/", json=payload, headers=admin_headers)

        assert response.status_code == 201

    @pytest.mark.parametrize("dates", [
        ["2024-01-02", "2024-01-01"],
        ["2024-01-01", "2024-01-01"],
    ])
    def test_history_dates_must_increase(self, client, admin_headers, dates):
        response = client.post(
            "/assets/", json=asset_payload(history_dates=dates), headers=admin_headers
        )

        assert response.status_code == 422

    def test_requires_admin(self, client, db, sample_user):
        response = client.post(
            "/assets/", json=asset_payload(), headers=get_auth_headers(db, sample_user)
        )

        assert response.status_code == 403

    def test_requires_token(self, client):
        response = client.post("/assets/", json=asset_payload())

        assert response.status_code == 401


class TestUpdateAsset:

    def test_partial_update(self, client, db, admin_headers):
        asset = create_asset(db, "AAPL", price="150")

        response = client.patch(
            f"/assets/{asset.id}", json={"price": "155.5"}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["price"]) == Decimal("155.5")
        assert data["name"] == "AAPL Inc."

    def test_history_replaced_together(self, client, db, admin_headers):
        asset = create_asset(db, "AAPL")

        response = client.patch(
            f"/assets/{asset.id}",
            json={"history_dates": ["2024-02-01"], "history_prices": ["160"]},
            headers=admin_headers,
        )

        assert response.json()["history_dates"] == ["2024-02-01"]

    def test_history_dates_alone_rejected(self, client, db, admin_headers):
        asset = create_asset(db, "AAPL")

        response = client.patch(
            f"/assets/{asset.id}", json={"history_dates": ["2024-02-01"]}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_unordered_history_rejected(self, client, db, admin_headers):
        asset = create_asset(db, "AAPL")

        response = client.patch(
            f"/assets/{asset.id}",
            json={"history_dates": ["2024-02-02", "2024-02-01"], "history_prices": ["1", "2"]},
            headers=admin_headers,
        )

        assert response.status_code == 422


class TestDeleteAsset:

    def test_soft_delete(self, client, db, admin_headers):
        asset = create_asset(db, "AAPL")

        response = client.delete(f"/assets/{asset.id}", headers=admin_headers)

        assert response.status_code == 204
        db.expire_all()
        assert db.get(Asset, asset.id).is_deleted is True
        assert client.get(f"/assets/{asset.id}").status_code == 404

    def test_delete_twice(self, client, db, admin_headers):
        asset = create_asset(db, "AAPL")
        client.delete(f"/assets/{asset.id}", headers=admin_headers)

        response = client.delete(f"/assets/{asset.id}", headers=admin_headers)

        assert response.status_code == 404


class TestBatchUpdatePrices:

    def test_updates_known_codes(self, client, db, admin_headers):
        create_asset(db, "AAPL", price="150")
        create_asset(db, "GONE", is_deleted=True)

        response = client.post(
            "/assets/batch-update-prices",
            json={"updates": [
                {"asset_code": "AAPL", "price": "151"},
                {"asset_code": "GONE", "price": "1"},
                {"asset_code": "NOPE", "price": "1"},
            ]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["results"] == [
            {"asset_code": "AAPL", "updated": True},
            {"asset_code": "GONE", "updated": False},
            {"asset_code": "NOPE", "updated": False},
        ]
        assert Decimal(client.get("/assets/code/AAPL").json()["price"]) == Decimal("151")

    def test_rejects_negative_history_price(self, client, db, admin_headers):
        create_asset(db, "AAPL", price="150")

        response = client.post(
            "/assets/batch-update-prices",
            json={"updates": [{
                "asset_code": "AAPL",
                "price": "151",
                "history_dates": ["2024-01-01", "2024-01-02"],
                "history_prices": ["150", "-151"],
            }]},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert Decimal(client.get("/assets/code/AAPL").json()["price"]) == Decimal("150")
