# backend/portfolio_tracker/schemas/statistics.py
"""
Pydantic schemas for the statistics endpoints.

- Top movers (period growth ranking)
- Net worth summary per asset type
- Month-over-month profit per asset type
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_tracker.models import AssetType


class RankedAssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    asset_code: str
    name: str
    asset_type: AssetType
    first_price: Decimal = Field(..., description="Oldest price in the history")
    last_price: Decimal = Field(..., description="Newest price in the history")
    growth: Decimal | None = Field(
        ...,
        description="last / first - 1, 4 decimal places (0.5 = +50%); null when the first price is 0",
    )

    @field_validator("growth", mode="before")
    @classmethod
    def non_finite_growth_to_none(cls, v: object) -> object:
        # Infinity / NaN from a zero first price have no JSON number form
        if isinstance(v, Decimal) and not v.is_finite():
            return None
        return v


class TopMoversResponse(BaseModel):
    top_stocks: list[RankedAssetResponse] = Field(default_factory=list)
    top_bonds: list[RankedAssetResponse] = Field(default_factory=list)


class UserSummaryResponse(BaseModel):
    """
    Net worth of a user per asset type at three reference points.

    month_start holds the values of the last observed date before the
    current month (previous month-end).
    """

    user_id: int
    as_of: dt.date | None = Field(..., description="Latest profit log date, null without logs")
    current: dict[AssetType, Decimal]
    yesterday: dict[AssetType, Decimal]
    month_start: dict[AssetType, Decimal]
    total_investment: Decimal = Field(..., description="Sum of buy amounts minus sum of sell amounts")


class MonthlyProfitPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str = Field(..., description="YYYY-MM")
    profit: Decimal


class MonthlyProfitResponse(BaseModel):
    user_id: int
    months: int
    series: dict[AssetType, list[MonthlyProfitPoint]] = Field(
        ...,
        description="One chronological series per asset type"
    )
