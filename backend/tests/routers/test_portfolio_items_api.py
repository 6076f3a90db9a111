# backend/tests/routers/test_portfolio_items_api.py
"""
Integration tests for the portfolio item (ledger entry) endpoints.

- GET /portfolio-items/search, /portfolio/{id}, /portfolio/{id}/holdings,
  /portfolio/{id}/stats, /{id}
- POST /portfolio-items/ and /batch (portfolio owner only)
- PATCH / DELETE /portfolio-items/{id}
"""

from datetime import date
from decimal import Decimal

import pytest

from conftest import create_item, create_portfolio, create_user, get_auth_headers
from portfolio_tracker.models import AssetType, PortfolioItem, TradeType


@pytest.fixture
def headers(db, sample_user):
    return get_auth_headers(db, sample_user)


def item_payload(portfolio_id: int, **overrides) -> dict:
    payload = {
        "portfolio_id": portfolio_id,
        "asset_code": "AAPL",
        "asset_type": "stock",
        "type": "buy",
        "quantity": "10",
        "amount": "1500.00",
        "purchase_date": "2024-01-15",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# CREATE
# =============================================================================

class TestCreateItem:

    def test_create(self, client, sample_portfolio, headers):
        response = client.post(
            "/portfolio-items/", json=item_payload(sample_portfolio.id), headers=headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["asset_code"] == "AAPL"
        assert data["type"] == "buy"
        assert Decimal(data["quantity"]) == Decimal("10")
        assert Decimal(data["amount"]) == Decimal("1500")

    def test_quantity_must_be_positive(self, client, sample_portfolio, headers):
        response = client.post(
            "/portfolio-items/",
            json=item_payload(sample_portfolio.id, quantity="0"),
            headers=headers,
        )

        assert response.status_code == 422

    def test_sell_date_before_purchase(self, client, sample_portfolio, headers):
        response = client.post(
            "/portfolio-items/",
            json=item_payload(sample_portfolio.id, sell_date="2024-01-01"),
            headers=headers,
        )

        assert response.status_code == 422

    def test_foreign_portfolio(self, client, db, headers):
        bob = create_user(db, username="bob")
        portfolio = create_portfolio(db, bob)

        response = client.post("/portfolio-items/", json=item_payload(portfolio.id), headers=headers)

        assert response.status_code == 403

    def test_missing_portfolio(self, client, headers):
        response = client.post("/portfolio-items/", json=item_payload(999), headers=headers)

        assert response.status_code == 404


class TestBatchCreate:

    def test_appends_in_request_order(self, client, sample_portfolio, headers):
        response = client.post(
            "/portfolio-items/batch",
            json={"items": [
                item_payload(sample_portfolio.id, asset_code="MSFT"),
                item_payload(sample_portfolio.id, asset_code="AAPL", type="sell", quantity="1"),
            ]},
            headers=headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Batch create completed"
        assert [i["asset_code"] for i in data["items"]] == ["MSFT", "AAPL"]

    def test_all_or_nothing(self, client, db, sample_portfolio, headers):
        bob_portfolio = create_portfolio(db, create_user(db, username="bob"))

        response = client.post(
            "/portfolio-items/batch",
            json={"items": [
                item_payload(sample_portfolio.id),
                item_payload(bob_portfolio.id),
            ]},
            headers=headers,
        )

        assert response.status_code == 403
        assert client.get(f"/portfolio-items/portfolio/{sample_portfolio.id}").json() == []


# =============================================================================
# READ
# =============================================================================

class TestLedger:

    def test_ledger_is_in_insertion_order(self, client, db, sample_portfolio):
        create_item(db, sample_portfolio, "AAPL", purchase_date=date(2024, 3, 1))
        create_item(db, sample_portfolio, "MSFT", purchase_date=date(2024, 1, 1))
        create_item(db, sample_portfolio, "GONE", is_deleted=True)

        response = client.get(f"/portfolio-items/portfolio/{sample_portfolio.id}")

        assert [i["asset_code"] for i in response.json()] == ["AAPL", "MSFT"]

    def test_deleted_portfolio(self, client, db, sample_user):
        portfolio = create_portfolio(db, sample_user, is_deleted=True)

        assert client.get(f"/portfolio-items/portfolio/{portfolio.id}").status_code == 404

    def test_search(self, client, db, sample_portfolio):
        create_item(db, sample_portfolio, "AAPL", amount="100", purchase_date=date(2024, 1, 1))
        create_item(db, sample_portfolio, "AAPL", amount="300", purchase_date=date(2024, 2, 1))
        create_item(db, sample_portfolio, "AAPLX", amount="200", purchase_date=date(2024, 3, 1))

        data = client.get("/portfolio-items/search", params={"asset_code": "AAPL"}).json()

        assert [Decimal(i["amount"]) for i in data["items"]] == [Decimal("300"), Decimal("100")]
        assert data["pagination"]["total"] == 2

    def test_search_by_side_and_amount(self, client, db, sample_portfolio):
        create_item(db, sample_portfolio, "AAPL", TradeType.BUY, amount="100")
        create_item(db, sample_portfolio, "AAPL", TradeType.SELL, amount="500")
        create_item(db, sample_portfolio, "AAPL", TradeType.SELL, amount="50")

        data = client.get(
            "/portfolio-items/search", params={"type": "sell", "min_amount": "100"}
        ).json()

        assert [Decimal(i["amount"]) for i in data["items"]] == [Decimal("500")]

    def test_get_item(self, client, db, sample_portfolio):
        item = create_item(db, sample_portfolio)
        gone = create_item(db, sample_portfolio, is_deleted=True)

        assert client.get(f"/portfolio-items/{item.id}").status_code == 200
        assert client.get(f"/portfolio-items/{gone.id}").status_code == 404


class TestHoldings:

    def test_groups_by_code(self, client, db, sample_portfolio):
        create_item(db, sample_portfolio, "MSFT", TradeType.BUY, "3", "900")
        create_item(db, sample_portfolio, "AAPL", TradeType.BUY, "10", "1000",
                    purchase_date=date(2024, 1, 1))
        create_item(db, sample_portfolio, "AAPL", TradeType.SELL, "4", "600",
                    purchase_date=date(2024, 2, 1))

        response = client.get(f"/portfolio-items/portfolio/{sample_portfolio.id}/holdings")

        assert response.status_code == 200
        groups = response.json()
        assert [g["asset_code"] for g in groups] == ["AAPL", "MSFT"]

        aapl = groups[0]
        assert Decimal(aapl["total_quantity"]) == Decimal("6")
        assert Decimal(aapl["total_amount"]) == Decimal("400")
        assert Decimal(aapl["sell_amount"]) == Decimal("600")
        assert [t["type"] for t in aapl["transactions"]] == ["sell", "buy"]


class TestItemStats:

    def test_stats(self, client, db, sample_portfolio):
        create_item(db, sample_portfolio, "AAPL", TradeType.BUY, "10", "1000")
        create_item(db, sample_portfolio, "AAPL", TradeType.SELL, "4", "600")
        create_item(db, sample_portfolio, "Bond A", TradeType.BUY, "2", "200",
                    asset_type=AssetType.BOND)

        data = client.get(f"/portfolio-items/portfolio/{sample_portfolio.id}/stats").json()

        assert data["total_items"] == 3
        assert data["buy_count"] == 2
        assert data["sell_count"] == 1
        assert Decimal(data["total_buy_amount"]) == Decimal("1200")
        assert Decimal(data["total_sell_amount"]) == Decimal("600")
        assert Decimal(data["total_quantity"]) == Decimal("8")
        assert len(data["asset_types"]) == 3


# =============================================================================
# UPDATE / DELETE
# =============================================================================

class TestUpdateItem:

    def test_correct_amount(self, client, db, sample_portfolio, headers):
        item = create_item(db, sample_portfolio)

        response = client.patch(
            f"/portfolio-items/{item.id}", json={"amount": "1234.50"}, headers=headers
        )

        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("1234.50")

    def test_other_owner_forbidden(self, client, db, sample_portfolio):
        item = create_item(db, sample_portfolio)
        bob = create_user(db, username="bob")

        response = client.patch(
            f"/portfolio-items/{item.id}", json={"amount": "1"}, headers=get_auth_headers(db, bob)
        )

        assert response.status_code == 403


class TestDeleteItem:

    def test_soft_delete(self, client, db, sample_portfolio, headers):
        item = create_item(db, sample_portfolio)

        response = client.delete(f"/portfolio-items/{item.id}", headers=headers)

        assert response.status_code == 204
        db.expire_all()
        assert db.get(PortfolioItem, item.id).is_deleted is True
