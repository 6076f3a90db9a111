# backend/portfolio_tracker/services/valuation/ranking.py
"""
Top movers screening.

growth = last_price / first_price − 1, rounded to 4 places (0.5 = +50%).
Assets with fewer than two price observations are left out rather than
ranked at zero. Only stocks and bonds are ranked.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP

from portfolio_tracker.models import AssetType
from portfolio_tracker.services.constants import GROWTH_PRECISION
from portfolio_tracker.services.valuation.calculators import lenient_decimal_context
from portfolio_tracker.services.valuation.types import AssetQuote, RankedAsset, TopMovers


class TopMoversCalculator:

    def calculate(self, assets: Iterable[AssetQuote], limit: int) -> TopMovers:
        """
        Rank stocks and bonds by period growth, best first.

        Args:
            assets: Candidate assets with their price histories
            limit: Maximum entries per list

        Returns:
            TopMovers with at most `limit` stocks and `limit` bonds
        """
        stocks: list[RankedAsset] = []
        bonds: list[RankedAsset] = []

        with lenient_decimal_context():
            for asset in assets:
                ranked = self.rank(asset)
                if ranked is None:
                    continue
                if asset.asset_type == AssetType.STOCK:
                    stocks.append(ranked)
                elif asset.asset_type == AssetType.BOND:
                    bonds.append(ranked)

            # Stable sort: equal growth keeps input order
            stocks.sort(key=lambda r: r.growth, reverse=True)
            bonds.sort(key=lambda r: r.growth, reverse=True)

        return TopMovers(
            top_stocks=tuple(stocks[:limit]),
            top_bonds=tuple(bonds[:limit]),
        )

    @staticmethod
    def rank(asset: AssetQuote) -> RankedAsset | None:
        """Growth of a single asset, or None with fewer than two prices."""
        prices = asset.history_prices
        if len(prices) < 2:
            return None

        first, last = prices[0], prices[-1]
        with lenient_decimal_context():
            growth = last / first - 1
            if growth.is_finite():
                growth = growth.quantize(GROWTH_PRECISION, rounding=ROUND_HALF_UP)

        return RankedAsset(
            asset_code=asset.asset_code,
            name=asset.name,
            asset_type=asset.asset_type,
            first_price=first,
            last_price=last,
            growth=growth,
        )
