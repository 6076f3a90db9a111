# backend/portfolio_tracker/services/valuation/types.py
"""
Internal data types for the valuation engine.

These dataclasses are the inputs and outputs of the pure calculators.
They are NOT Pydantic schemas; API serialization lives in
portfolio_tracker/schemas/valuation.py and schemas/statistics.py.

Design Principles:
- Immutable where possible (frozen=True for value objects)
- Decimal for ALL financial values (never float)
- No ORM objects: the service layer converts rows into these types, so
  calculators can be exercised without a database

Type Hierarchy:
    LedgerEntry        - One buy/sell record of a portfolio
    AssetQuote         - Current price plus positional price history
    PortfolioLedger    - A named portfolio and its ordered entries
    Holding            - Derived position for one asset
    ValuationSummary   - Holdings plus portfolio totals
    NetWorthPoint      - One point of a net worth series
    ProfitObservation  - Dated value of one asset type
    MonthlyProfit      - Month-over-month profit for one month
    NetWorthSummary    - Latest / previous day / previous month-end values
    RankedAsset        - Period growth of one asset
    TopMovers          - Best stocks and bonds by growth
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from portfolio_tracker.models import AssetType, TradeType


# =============================================================================
# INPUTS
# =============================================================================

@dataclass(frozen=True)
class LedgerEntry:
    """
    A single transaction of a portfolio ledger.

    Attributes:
        asset_code: Code of the traded asset
        side: BUY or SELL
        quantity: Units traded (expected positive, not validated)
        amount: Total cost of a buy, total proceeds of a sell
        trade_date: Date of the trade
        asset_type: Asset class recorded on the entry
    """

    asset_code: str
    side: TradeType
    quantity: Decimal
    amount: Decimal
    trade_date: date | None = None
    asset_type: AssetType = AssetType.STOCK

    @property
    def unit_price(self) -> Decimal:
        """amount / quantity; call inside a non-trapping decimal context."""
        return self.amount / self.quantity


@dataclass(frozen=True)
class AssetQuote:
    """
    Price data for one asset.

    history_dates[i] is the date of history_prices[i]. Both sequences have
    the same length; series of different assets are aligned by index only.
    """

    asset_code: str
    asset_type: AssetType
    price: Decimal
    name: str = ""
    currency: str = "USD"
    history_dates: tuple[date, ...] = ()
    history_prices: tuple[Decimal, ...] = ()


@dataclass(frozen=True)
class PortfolioLedger:
    """A portfolio with its ledger in processing order."""

    portfolio_id: int
    name: str
    entries: tuple[LedgerEntry, ...] = ()


# =============================================================================
# HOLDINGS & VALUATION
# =============================================================================

class HoldingState(str, enum.Enum):
    """Lifecycle state of a holding, from the sign of its quantity."""
    LONG = "long"
    SHORT = "short"
    CLOSED = "closed"


@dataclass(frozen=True)
class Holding:
    """
    Derived position for one asset.

    Attributes:
        quantity: Running quantity (negative for a short)
        cost: Running cost basis (signed)
        avg_cost: cost / quantity while open, 0 when closed
        market_value: quantity × current price (signed), 0 when closed
        unrealized_gain: Paper gain against the current price, 0 when closed
        realized_gain: Gain locked in by this asset's sells

    A closed holding keeps its realized gain but all derived fields are zero.
    """

    asset_code: str
    asset_type: AssetType
    state: HoldingState
    quantity: Decimal
    cost: Decimal
    avg_cost: Decimal
    current_price: Decimal
    market_value: Decimal
    unrealized_gain: Decimal
    realized_gain: Decimal

    @property
    def is_open(self) -> bool:
        return self.state != HoldingState.CLOSED


@dataclass(frozen=True)
class ValuationSummary:
    """
    Portfolio valuation totals.

    Formulas:
        total_value = Σ market_value over open holdings
        total_cost = Σ |cost| over open holdings
        total_gain = realized_gain + unrealized_gain
        total_gain_percent = total_gain / total_cost × 100 (0 when total_cost is 0)
    """

    holdings: tuple[Holding, ...]
    realized_gain: Decimal
    unrealized_gain: Decimal
    total_value: Decimal
    total_cost: Decimal
    total_gain: Decimal
    total_gain_percent: Decimal
    skipped_asset_codes: tuple[str, ...] = ()


# =============================================================================
# TIME SERIES
# =============================================================================

@dataclass(frozen=True)
class NetWorthPoint:
    time: date
    value: Decimal


@dataclass(frozen=True)
class ProfitObservation:
    """Value of one asset type on one date (already summed across items)."""

    date: date
    value: Decimal
    asset_type: AssetType


@dataclass(frozen=True)
class MonthlyProfit:
    month: str  # "YYYY-MM"
    profit: Decimal


@dataclass
class NetWorthSummary:
    """
    Net worth per asset type at the latest observed date, the day before
    it, and the last observed date of the previous month.

    Attributes:
        as_of: Latest observation date (None when there are no observations)
        total_investment: Σ buy amounts − Σ sell amounts
    """

    as_of: date | None
    current: dict[AssetType, Decimal] = field(default_factory=dict)
    yesterday: dict[AssetType, Decimal] = field(default_factory=dict)
    month_start: dict[AssetType, Decimal] = field(default_factory=dict)
    total_investment: Decimal = Decimal("0")


# =============================================================================
# RANKING
# =============================================================================

@dataclass(frozen=True)
class RankedAsset:
    """
    Period growth of an asset: last / first − 1, rounded to 4 places.
    """

    asset_code: str
    name: str
    asset_type: AssetType
    first_price: Decimal
    last_price: Decimal
    growth: Decimal


@dataclass(frozen=True)
class TopMovers:
    top_stocks: tuple[RankedAsset, ...]
    top_bonds: tuple[RankedAsset, ...]
