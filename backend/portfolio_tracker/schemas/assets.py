# backend/portfolio_tracker/schemas/assets.py
"""
Pydantic schemas for Asset validation.

An asset carries its current price plus two parallel sequences,
history_dates and history_prices. The sequences are positionally aligned:
history_prices[i] is the price on history_dates[i]. Dates are strictly
increasing and prices are non-negative.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from portfolio_tracker.models import AssetType
from portfolio_tracker.schemas.pagination import PaginationMeta
from portfolio_tracker.schemas.validators import validate_asset_code, validate_currency

HistoryPrice = Annotated[Decimal, Field(ge=0)]


# =============================================================================
# BASE SCHEMA
# =============================================================================

class AssetBase(BaseModel):
    """
    Fields shared by Create and Response.
    """

    asset_code: str = Field(
        ...,
        min_length=1,
        max_length=50,
        examples=["AAPL", "Bond A"],
        description="Unique asset code"
    )

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        examples=["Apple Inc.", "US Treasury 10Y"],
        description="Display name"
    )

    asset_type: AssetType = Field(
        ...,
        description="Asset class: stock, bond or cash"
    )

    price: Decimal = Field(
        ...,
        ge=0,
        description="Current price"
    )

    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Trading currency (ISO 4217)"
    )

    @field_validator("asset_code")
    @classmethod
    def validate_and_normalize_asset_code(cls, v: str) -> str:
        return validate_asset_code(v)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("currency")
    @classmethod
    def validate_and_normalize_currency(cls, v: str) -> str:
        return validate_currency(v)


def _check_history(dates: list | None, prices: list | None) -> None:
    if dates is None and prices is None:
        return
    if dates is None or prices is None:
        raise ValueError("history_dates and history_prices must be provided together")
    if len(dates) != len(prices):
        raise ValueError(
            f"history_dates ({len(dates)}) and history_prices ({len(prices)}) "
            "must have the same length"
        )
    for previous, current in zip(dates, dates[1:]):
        if current <= previous:
            raise ValueError(
                f"history_dates must be strictly increasing ({current} follows {previous})"
            )


# =============================================================================
# CREATE / UPDATE SCHEMAS
# =============================================================================

class AssetCreate(AssetBase):
    """Schema for creating an asset (admin only)."""

    history_dates: list[date] = Field(
        default_factory=list,
        description="Dates of the price history, oldest first"
    )
    history_prices: list[HistoryPrice] = Field(
        default_factory=list,
        description="Prices matching history_dates by position"
    )

    @model_validator(mode="after")
    def validate_history(self) -> "AssetCreate":
        _check_history(self.history_dates, self.history_prices)
        return self


class AssetUpdate(BaseModel):
    """
    Schema for updating an asset. All fields optional.

    The asset code is immutable; the history sequences must be replaced
    together.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    asset_type: AssetType | None = Field(default=None)
    price: Decimal | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    history_dates: list[date] | None = Field(default=None)
    history_prices: list[HistoryPrice] | None = Field(default=None)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip()

    @field_validator("currency")
    @classmethod
    def validate_and_normalize_currency(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_currency(v)

    @model_validator(mode="after")
    def validate_history(self) -> "AssetUpdate":
        _check_history(self.history_dates, self.history_prices)
        return self


class AssetPriceUpdate(BaseModel):
    """One entry of a batch price update, addressed by asset code."""

    asset_code: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., ge=0)
    history_dates: list[date] | None = Field(default=None)
    history_prices: list[HistoryPrice] | None = Field(default=None)

    @field_validator("asset_code")
    @classmethod
    def strip_asset_code(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def validate_history(self) -> "AssetPriceUpdate":
        _check_history(self.history_dates, self.history_prices)
        return self


class AssetBatchPriceUpdateRequest(BaseModel):
    updates: list[AssetPriceUpdate] = Field(..., min_length=1, max_length=500)


class AssetPriceUpdateResult(BaseModel):
    asset_code: str
    updated: bool = Field(..., description="False when no live asset has this code")


class AssetBatchPriceUpdateResponse(BaseModel):
    message: str = Field(default="Batch update completed")
    results: list[AssetPriceUpdateResult]


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class AssetResponse(AssetBase):
    """Schema for API responses."""

    id: int = Field(..., description="Unique identifier")
    history_dates: list[date] = Field(default_factory=list)
    history_prices: list[Decimal] = Field(default_factory=list)
    created_at: datetime = Field(..., description="When the asset was created")
    updated_at: datetime = Field(..., description="When the asset was last modified")

    model_config = ConfigDict(from_attributes=True)


class AssetListResponse(BaseModel):
    items: list[AssetResponse] = Field(..., description="Assets of the current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")
