# backend/portfolio_tracker/services/valuation/timeseries.py
"""
Time series calculators.

- NetWorthCalculator: index-aligned net worth series per portfolio
- MonthlyProfitCalculator: month-over-month profit per asset type
- NetWorthSummaryCalculator: latest / previous day / previous month-end values

Like the point-in-time calculators these are stateless and read only
their arguments.

Alignment caveat:
    Price histories of different assets are merged by position, not by
    date. Index i of every asset is treated as the same day even when the
    underlying dates differ. Stored histories are expected to share a
    common calendar; nothing here checks that.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from decimal import Decimal

from portfolio_tracker.models import AssetType, TradeType
from portfolio_tracker.services.constants import ZERO
from portfolio_tracker.services.valuation.calculators import lenient_decimal_context
from portfolio_tracker.services.valuation.types import (
    AssetQuote,
    LedgerEntry,
    MonthlyProfit,
    NetWorthPoint,
    NetWorthSummary,
    PortfolioLedger,
    ProfitObservation,
)
from portfolio_tracker.utils.date_utils import (
    first_of_month,
    month_label,
    trailing_month_labels,
)

logger = logging.getLogger(__name__)


# =============================================================================
# NET WORTH SERIES
# =============================================================================

class NetWorthCalculator:
    """
    Builds one net worth series per portfolio over a shared time axis.

    Axis: the longest history_dates among assets referenced by any BUY
    entry of any given portfolio (by length; the first one found wins ties).

    Value at index i: Σ price[i] × quantity over the portfolio's BUY entries
    whose asset has a price at index i. SELL entries are ignored.

    Results are keyed by portfolio name. A later portfolio with the same
    name replaces an earlier one in the result.
    """

    def calculate(
            self,
            portfolios: Sequence[PortfolioLedger],
            assets: Mapping[str, AssetQuote],
    ) -> dict[str, list[NetWorthPoint]]:
        axis = self._select_axis(portfolios, assets)

        series: dict[str, list[NetWorthPoint]] = {}
        with lenient_decimal_context():
            for portfolio in portfolios:
                buys = [
                    (assets[entry.asset_code], entry.quantity)
                    for entry in portfolio.entries
                    if entry.side == TradeType.BUY and entry.asset_code in assets
                ]
                if portfolio.name in series:
                    logger.warning(
                        f"Duplicate portfolio name '{portfolio.name}', "
                        f"portfolio {portfolio.portfolio_id} replaces the earlier series"
                    )
                series[portfolio.name] = [
                    NetWorthPoint(time=day, value=self._value_at(index, buys))
                    for index, day in enumerate(axis)
                ]

        return series

    @staticmethod
    def _select_axis(
            portfolios: Sequence[PortfolioLedger],
            assets: Mapping[str, AssetQuote],
    ) -> tuple[date, ...]:
        axis: tuple[date, ...] = ()
        for portfolio in portfolios:
            for entry in portfolio.entries:
                if entry.side != TradeType.BUY:
                    continue
                asset = assets.get(entry.asset_code)
                if asset is not None and len(asset.history_dates) > len(axis):
                    axis = asset.history_dates
        return axis

    @staticmethod
    def _value_at(index: int, buys: list[tuple[AssetQuote, Decimal]]) -> Decimal:
        total = ZERO
        for asset, quantity in buys:
            if index < len(asset.history_prices):
                total += asset.history_prices[index] * quantity
        return total


# =============================================================================
# MONTHLY PROFIT
# =============================================================================

class MonthlyProfitCalculator:
    """
    Month-over-month profit per asset type.

    For each asset type, the value of a month is the value of its
    latest-dated observation within that month. A later observation only
    replaces the kept one when its date is strictly greater.

    profit[0] = 0
    profit[i] = value[i] − value[i−1], a month without observations counting as 0
    """

    def calculate(
            self,
            observations: Iterable[ProfitObservation],
            months_back: int,
            today: date | None = None,
    ) -> dict[AssetType, list[MonthlyProfit]]:
        """
        Args:
            observations: Dated values per asset type, in any order
            months_back: Number of months ending with today's month
            today: Reference date (defaults to date.today())

        Returns:
            One entry per asset type (always all of them), each with
            months_back MonthlyProfit items in chronological order
        """
        labels = trailing_month_labels(months_back, today or date.today())

        latest: dict[AssetType, dict[str, tuple[date, Decimal]]] = {
            asset_type: {} for asset_type in AssetType
        }
        for obs in observations:
            per_month = latest[obs.asset_type]
            label = month_label(obs.date)
            kept = per_month.get(label)
            if kept is None or obs.date > kept[0]:
                per_month[label] = (obs.date, obs.value)

        result: dict[AssetType, list[MonthlyProfit]] = {}
        with lenient_decimal_context():
            for asset_type, per_month in latest.items():
                values = [per_month[label][1] if label in per_month else ZERO for label in labels]
                result[asset_type] = [
                    MonthlyProfit(
                        month=label,
                        profit=ZERO if i == 0 else values[i] - values[i - 1],
                    )
                    for i, label in enumerate(labels)
                ]
        return result


# =============================================================================
# NET WORTH SUMMARY
# =============================================================================

class NetWorthSummaryCalculator:
    """
    Net worth per asset type at three reference points.

    - current: observations dated on the latest observed date
    - yesterday: observations dated exactly one day earlier
    - month_start: observations on the last observed date before the first
      day of the latest date's month (previous month-end)

    total_investment = Σ buy amounts − Σ sell amounts.
    """

    def calculate(
            self,
            observations: Sequence[ProfitObservation],
            entries: Iterable[LedgerEntry] = (),
    ) -> NetWorthSummary:
        with lenient_decimal_context():
            total_investment = ZERO
            for entry in entries:
                if entry.side == TradeType.BUY:
                    total_investment += entry.amount
                else:
                    total_investment -= entry.amount

            summary = NetWorthSummary(
                as_of=None,
                current=self._zeroes(),
                yesterday=self._zeroes(),
                month_start=self._zeroes(),
                total_investment=total_investment,
            )
            if not observations:
                return summary

            latest = max(obs.date for obs in observations)
            previous_day = latest - timedelta(days=1)
            month_begin = first_of_month(latest)
            before_month = [obs.date for obs in observations if obs.date < month_begin]
            previous_month_end = max(before_month) if before_month else None

            summary.as_of = latest
            for obs in observations:
                if obs.date == latest:
                    summary.current[obs.asset_type] += obs.value
                if obs.date == previous_day:
                    summary.yesterday[obs.asset_type] += obs.value
                if obs.date == previous_month_end:
                    summary.month_start[obs.asset_type] += obs.value

        return summary

    @staticmethod
    def _zeroes() -> dict[AssetType, Decimal]:
        return {asset_type: ZERO for asset_type in AssetType}
