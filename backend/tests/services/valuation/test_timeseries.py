# backend/tests/services/valuation/test_timeseries.py
"""
Unit tests for the time series calculators.

Test Coverage:
- NetWorthCalculator: shared axis, positional alignment, sells ignored,
  name-keyed results
- MonthlyProfitCalculator: latest value per month, month-over-month deltas
- NetWorthSummaryCalculator: latest / previous day / previous month-end
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_tracker.models import AssetType, TradeType
from portfolio_tracker.services.valuation.timeseries import (
    MonthlyProfitCalculator,
    NetWorthCalculator,
    NetWorthSummaryCalculator,
)
from portfolio_tracker.services.valuation.types import (
    AssetQuote,
    LedgerEntry,
    PortfolioLedger,
    ProfitObservation,
)


# =============================================================================
# FIXTURES
# =============================================================================

D1, D2, D3 = date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)


@pytest.fixture
def assets() -> dict[str, AssetQuote]:
    """AAPL with three history points, Bond A with two."""
    return {
        "AAPL": AssetQuote(
            asset_code="AAPL",
            asset_type=AssetType.STOCK,
            price=Decimal("12"),
            history_dates=(D1, D2, D3),
            history_prices=(Decimal("10"), Decimal("11"), Decimal("12")),
        ),
        "Bond A": AssetQuote(
            asset_code="Bond A",
            asset_type=AssetType.BOND,
            price=Decimal("101"),
            history_dates=(D1, D2),
            history_prices=(Decimal("100"), Decimal("101")),
        ),
    }


def entry(code: str, quantity: str, side: TradeType = TradeType.BUY) -> LedgerEntry:
    return LedgerEntry(
        asset_code=code,
        side=side,
        quantity=Decimal(quantity),
        amount=Decimal("0"),
    )


# =============================================================================
# NET WORTH SERIES
# =============================================================================

class TestNetWorthCalculator:

    def test_longest_history_is_the_axis(self, assets):
        ledger = PortfolioLedger(1, "Main", (entry("AAPL", "2"), entry("Bond A", "1")))

        series = NetWorthCalculator().calculate([ledger], assets)

        assert [p.time for p in series["Main"]] == [D1, D2, D3]

    def test_values_are_aligned_by_position(self, assets):
        """The shorter Bond A history stops contributing after its last index."""
        ledger = PortfolioLedger(1, "Main", (entry("AAPL", "2"), entry("Bond A", "1")))

        series = NetWorthCalculator().calculate([ledger], assets)

        assert [p.value for p in series["Main"]] == [
            Decimal("120"),  # 2×10 + 1×100
            Decimal("123"),  # 2×11 + 1×101
            Decimal("24"),   # 2×12
        ]

    def test_sells_are_ignored(self, assets):
        ledger = PortfolioLedger(
            1, "Main", (entry("AAPL", "2"), entry("AAPL", "2", TradeType.SELL))
        )

        series = NetWorthCalculator().calculate([ledger], assets)

        assert [p.value for p in series["Main"]] == [Decimal("20"), Decimal("22"), Decimal("24")]

    def test_portfolios_share_one_axis(self, assets):
        """A portfolio holding only the short asset still spans the long axis."""
        ledgers = [
            PortfolioLedger(1, "Stocks", (entry("AAPL", "1"),)),
            PortfolioLedger(2, "Bonds", (entry("Bond A", "1"),)),
        ]

        series = NetWorthCalculator().calculate(ledgers, assets)

        assert [p.value for p in series["Bonds"]] == [Decimal("100"), Decimal("101"), Decimal("0")]
        assert len(series["Stocks"]) == 3

    def test_portfolio_without_buys_is_all_zero(self, assets):
        ledgers = [
            PortfolioLedger(1, "Main", (entry("AAPL", "1"),)),
            PortfolioLedger(2, "Empty", ()),
        ]

        series = NetWorthCalculator().calculate(ledgers, assets)

        assert [p.value for p in series["Empty"]] == [Decimal("0")] * 3

    def test_same_name_keeps_last_portfolio(self, assets):
        ledgers = [
            PortfolioLedger(1, "Main", (entry("AAPL", "1"),)),
            PortfolioLedger(2, "Main", (entry("AAPL", "5"),)),
        ]

        series = NetWorthCalculator().calculate(ledgers, assets)

        assert list(series) == ["Main"]
        assert series["Main"][0].value == Decimal("50")

    def test_unknown_assets_are_ignored(self, assets):
        ledger = PortfolioLedger(1, "Main", (entry("GHOST", "3"), entry("AAPL", "1")))

        series = NetWorthCalculator().calculate([ledger], assets)

        assert [p.value for p in series["Main"]] == [Decimal("10"), Decimal("11"), Decimal("12")]

    def test_no_priced_buys_gives_empty_series(self, assets):
        ledger = PortfolioLedger(1, "Main", (entry("GHOST", "3"),))

        series = NetWorthCalculator().calculate([ledger], assets)

        assert series == {"Main": []}


# =============================================================================
# MONTHLY PROFIT
# =============================================================================

def obs(day: date, value: str, asset_type: AssetType = AssetType.STOCK) -> ProfitObservation:
    return ProfitObservation(date=day, value=Decimal(value), asset_type=asset_type)


class TestMonthlyProfitCalculator:

    def test_month_over_month_deltas(self):
        """Monthly values [1000, 1100, 1050] give profits [0, 100, -50]."""
        observations = [
            obs(date(2024, 1, 10), "1000"),
            obs(date(2024, 2, 5), "900"),
            obs(date(2024, 2, 28), "1100"),
            obs(date(2024, 3, 15), "1050"),
        ]

        result = MonthlyProfitCalculator().calculate(observations, 3, today=date(2024, 3, 20))

        stock = result[AssetType.STOCK]
        assert [p.month for p in stock] == ["2024-01", "2024-02", "2024-03"]
        assert [p.profit for p in stock] == [Decimal("0"), Decimal("100"), Decimal("-50")]

    def test_input_order_does_not_matter(self):
        observations = [
            obs(date(2024, 2, 28), "1100"),
            obs(date(2024, 1, 10), "1000"),
            obs(date(2024, 2, 5), "900"),
        ]

        result = MonthlyProfitCalculator().calculate(observations, 2, today=date(2024, 2, 29))

        assert [p.profit for p in result[AssetType.STOCK]] == [Decimal("0"), Decimal("100")]

    def test_every_asset_type_is_present(self):
        result = MonthlyProfitCalculator().calculate(
            [obs(date(2024, 1, 10), "1000")], 2, today=date(2024, 2, 1)
        )

        assert set(result) == set(AssetType)
        assert [p.profit for p in result[AssetType.BOND]] == [Decimal("0"), Decimal("0")]

    def test_month_without_observations_counts_as_zero(self):
        observations = [obs(date(2024, 1, 10), "1000")]

        result = MonthlyProfitCalculator().calculate(observations, 2, today=date(2024, 2, 1))

        assert [p.profit for p in result[AssetType.STOCK]] == [Decimal("0"), Decimal("-1000")]

    def test_same_date_keeps_first_observation(self):
        observations = [obs(date(2024, 1, 10), "5"), obs(date(2024, 1, 10), "7")]

        result = MonthlyProfitCalculator().calculate(observations, 2, today=date(2024, 2, 1))

        assert result[AssetType.STOCK][1].profit == Decimal("-5")

    def test_months_span_a_year_boundary(self):
        result = MonthlyProfitCalculator().calculate([], 3, today=date(2024, 1, 31))

        assert [p.month for p in result[AssetType.CASH]] == ["2023-11", "2023-12", "2024-01"]


# =============================================================================
# NET WORTH SUMMARY
# =============================================================================

class TestNetWorthSummaryCalculator:

    @pytest.fixture
    def observations(self) -> list[ProfitObservation]:
        return [
            obs(date(2024, 2, 10), "800"),
            obs(date(2024, 2, 27), "480", AssetType.BOND),
            obs(date(2024, 2, 28), "900"),
            obs(date(2024, 3, 14), "950"),
            obs(date(2024, 3, 15), "1000"),
            obs(date(2024, 3, 15), "500", AssetType.BOND),
        ]

    def test_reference_points(self, observations):
        summary = NetWorthSummaryCalculator().calculate(observations)

        assert summary.as_of == date(2024, 3, 15)
        assert summary.current == {
            AssetType.STOCK: Decimal("1000"),
            AssetType.BOND: Decimal("500"),
            AssetType.CASH: Decimal("0"),
        }
        assert summary.yesterday[AssetType.STOCK] == Decimal("950")
        assert summary.yesterday[AssetType.BOND] == Decimal("0")

    def test_month_start_is_previous_month_end(self, observations):
        """Only observations on the last date before the month count."""
        summary = NetWorthSummaryCalculator().calculate(observations)

        assert summary.month_start[AssetType.STOCK] == Decimal("900")
        assert summary.month_start[AssetType.BOND] == Decimal("0")

    def test_total_investment(self, observations):
        entries = [
            LedgerEntry("AAPL", TradeType.BUY, Decimal("10"), Decimal("1000")),
            LedgerEntry("Bond A", TradeType.BUY, Decimal("5"), Decimal("500")),
            LedgerEntry("AAPL", TradeType.SELL, Decimal("2"), Decimal("200")),
        ]

        summary = NetWorthSummaryCalculator().calculate(observations, entries)

        assert summary.total_investment == Decimal("1300")

    def test_no_observations(self):
        entries = [LedgerEntry("AAPL", TradeType.BUY, Decimal("1"), Decimal("100"))]

        summary = NetWorthSummaryCalculator().calculate([], entries)

        assert summary.as_of is None
        assert all(v == Decimal("0") for v in summary.current.values())
        assert summary.total_investment == Decimal("100")
