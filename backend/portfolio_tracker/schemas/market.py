# backend/portfolio_tracker/schemas/market.py
"""
Pydantic schemas for the simulated market feed.

Quotes are synthetic display data produced by MarketSimulator, so they
are plain floats rounded to cents rather than Decimals.
"""

from pydantic import BaseModel, ConfigDict, Field

from portfolio_tracker.models import AssetType


class IndexQuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., examples=["S&P 500"])
    value: float = Field(..., description="Last point of the trend")
    change: float = Field(..., description="Percent change against the previous point")
    trend: list[float] = Field(..., description="Intraday random walk")


class RiseFallBucketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    range: str = Field(..., examples=["-2%", "Lim Up"])
    count: int
    sort_order: int


class RiseFallResponse(BaseModel):
    histogram: list[RiseFallBucketResponse]


class StockQuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    name: str
    price: float
    change: float = Field(..., description="Daily change in percent")
    change_amount: float


class MarketAssetQuoteResponse(StockQuoteResponse):
    type: AssetType
