# backend/portfolio_tracker/schemas/portfolio_items.py
"""
Pydantic schemas for portfolio items (ledger entries).

A portfolio item is one buy or sell of an asset:
    amount = total cost of a buy, total proceeds of a sell
    unit price = amount / quantity

Validation layers:
- Field constraints: positive quantity, non-negative amount
- Field validators: asset code normalization
- Router: portfolio existence and ownership
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from portfolio_tracker.models import AssetType, TradeType
from portfolio_tracker.schemas.pagination import PaginationMeta
from portfolio_tracker.schemas.validators import validate_asset_code


# =============================================================================
# BASE SCHEMA
# =============================================================================

class PortfolioItemBase(BaseModel):
    """Fields common to Create and Response."""

    asset_code: str = Field(
        ...,
        min_length=1,
        max_length=50,
        examples=["AAPL"],
        description="Code of the traded asset"
    )
    asset_type: AssetType = Field(..., description="Asset class recorded on the entry")
    type: TradeType = Field(..., description="buy or sell")
    quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=4,
        description="Units traded (always positive)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=18,
        decimal_places=2,
        description="Total cost (buy) or total proceeds (sell)"
    )
    purchase_date: date = Field(..., description="Trade date")
    sell_date: date | None = Field(default=None, description="Close date, if any")

    @field_validator("asset_code")
    @classmethod
    def validate_and_normalize_asset_code(cls, v: str) -> str:
        return validate_asset_code(v)


# =============================================================================
# CREATE / UPDATE SCHEMAS
# =============================================================================

class PortfolioItemCreate(PortfolioItemBase):
    """Schema for recording a trade in a portfolio."""

    portfolio_id: int = Field(..., gt=0, description="Portfolio receiving the entry")

    @model_validator(mode="after")
    def validate_dates(self) -> "PortfolioItemCreate":
        if self.sell_date is not None and self.sell_date < self.purchase_date:
            raise ValueError("sell_date cannot be before purchase_date")
        return self


class PortfolioItemBatchCreate(BaseModel):
    items: list[PortfolioItemCreate] = Field(..., min_length=1, max_length=500)


class PortfolioItemUpdate(BaseModel):
    """
    Schema for correcting a ledger entry. All fields optional.

    An entry cannot be moved to another portfolio.
    """

    asset_code: str | None = Field(default=None, min_length=1, max_length=50)
    asset_type: AssetType | None = None
    type: TradeType | None = None
    quantity: Decimal | None = Field(default=None, gt=0, max_digits=18, decimal_places=4)
    amount: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)
    purchase_date: date | None = None
    sell_date: date | None = None

    @field_validator("asset_code")
    @classmethod
    def validate_and_normalize_asset_code(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_asset_code(v)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class PortfolioItemResponse(BaseModel):
    """Stored ledger entry."""

    id: int
    portfolio_id: int
    asset_code: str
    asset_type: AssetType
    type: TradeType
    quantity: Decimal
    amount: Decimal
    purchase_date: date
    sell_date: date | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PortfolioItemListResponse(BaseModel):
    items: list[PortfolioItemResponse] = Field(..., description="Entries of the current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")


class PortfolioItemBatchResponse(BaseModel):
    message: str = Field(default="Batch create completed")
    items: list[PortfolioItemResponse]


class HoldingGroup(BaseModel):
    """
    Net position of one asset code built from plain sums of the entries.

    total_amount = buy_amount - sell_amount
    total_quantity = buy_quantity - sell_quantity
    """

    asset_code: str
    asset_type: AssetType
    total_quantity: Decimal
    total_amount: Decimal
    buy_quantity: Decimal
    sell_quantity: Decimal
    buy_amount: Decimal
    sell_amount: Decimal
    transactions: list[PortfolioItemResponse]


class AssetTypeTradeStats(BaseModel):
    asset_type: AssetType
    type: TradeType
    count: int
    amount: Decimal


class PortfolioItemStatsResponse(BaseModel):
    """Aggregate counts and sums over a portfolio's ledger."""

    total_items: int
    total_buy_amount: Decimal
    total_sell_amount: Decimal
    buy_count: int
    sell_count: int
    total_quantity: Decimal = Field(..., description="Bought minus sold units, all assets")
    asset_types: list[AssetTypeTradeStats] = Field(
        default_factory=list,
        description="Count and amount per (asset type, side)"
    )
