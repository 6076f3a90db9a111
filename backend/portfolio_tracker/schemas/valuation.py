# backend/portfolio_tracker/schemas/valuation.py
"""
Pydantic schemas for portfolio valuation.

These schemas handle:
- Holdings breakdown (long / short / closed positions)
- Realized and unrealized gain, portfolio totals
- Net worth series per portfolio

They mirror the calculator dataclasses in services/valuation/types.py and
are populated with model_validate(..., from_attributes=True).
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from portfolio_tracker.models import AssetType
from portfolio_tracker.services.valuation.types import HoldingState


# =============================================================================
# HOLDINGS
# =============================================================================

class HoldingResponse(BaseModel):
    """Derived position for one asset."""

    model_config = ConfigDict(from_attributes=True)

    asset_code: str = Field(..., description="Asset code")
    asset_type: AssetType = Field(..., description="Asset class")
    state: HoldingState = Field(..., description="long, short or closed")
    quantity: Decimal = Field(..., description="Running quantity, negative for a short")
    cost: Decimal = Field(..., description="Running cost basis")
    avg_cost: Decimal = Field(..., description="cost / quantity, 0 when closed")
    current_price: Decimal = Field(..., description="Current asset price")
    market_value: Decimal = Field(..., description="quantity × current price, 0 when closed")
    unrealized_gain: Decimal = Field(..., description="Paper gain, 0 when closed")
    realized_gain: Decimal = Field(..., description="Gain locked in by sells")


class PortfolioValuationResponse(BaseModel):
    """
    Valuation of one portfolio.

    total_gain_percent is expressed in percent (12.5 = +12.5%).
    """

    model_config = ConfigDict(from_attributes=True)

    portfolio_id: int
    portfolio_name: str
    holdings: list[HoldingResponse] = Field(default_factory=list)
    realized_gain: Decimal
    unrealized_gain: Decimal
    total_value: Decimal
    total_cost: Decimal
    total_gain: Decimal
    total_gain_percent: Decimal
    skipped_asset_codes: list[str] = Field(
        default_factory=list,
        description="Traded asset codes without a live asset (left out of every total)"
    )


# =============================================================================
# NET WORTH SERIES
# =============================================================================

class NetWorthPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time: dt.date
    value: Decimal


class NetWorthResponse(BaseModel):
    """
    Net worth series of every live portfolio of a user, keyed by name.

    All series share the same time axis.
    """

    user_id: int
    series: dict[str, list[NetWorthPointResponse]] = Field(default_factory=dict)
