# backend/portfolio_tracker/schemas/portfolios.py
"""
Pydantic schemas for Portfolio validation.

These schemas define:
- What data clients must send (Create)
- What data clients can update (Update)
- What data the API returns (Response, Stats)

The owner is never part of a request body: it comes from the bearer token.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_tracker.schemas.pagination import PaginationMeta


# =============================================================================
# CREATE / UPDATE SCHEMAS
# =============================================================================

class PortfolioCreate(BaseModel):
    """Schema for creating a portfolio owned by the current user."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Retirement", "Tech Stocks"],
        description="Name of the portfolio"
    )

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize name: trim whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class PortfolioUpdate(BaseModel):
    """
    Schema for updating a portfolio.

    Ownership cannot be transferred, so only the name is editable.
    """

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="New name for the portfolio"
    )

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class PortfolioResponse(BaseModel):
    """Schema for API responses."""

    id: int = Field(..., description="Unique identifier")
    user_id: int = Field(..., description="ID of the portfolio owner")
    name: str = Field(..., description="Name of the portfolio")
    created_at: datetime = Field(..., description="When the portfolio was created")
    updated_at: datetime = Field(..., description="When the portfolio was last modified")

    model_config = ConfigDict(from_attributes=True)


class PortfolioListResponse(BaseModel):
    """
    Response schema for paginated portfolio list.
    """

    items: list[PortfolioResponse] = Field(..., description="List of portfolios for current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")


class PortfolioStats(BaseModel):
    """Ledger counts of one portfolio (live items only)."""

    total_items: int = Field(..., description="Number of ledger entries")
    total_amount: Decimal = Field(..., description="Sum of entry amounts, buys and sells alike")
    asset_types: dict[str, int] = Field(
        default_factory=dict,
        description="Entry count per asset type"
    )
    buy_count: int
    sell_count: int


class PortfolioStatsResponse(BaseModel):
    portfolio: PortfolioResponse
    stats: PortfolioStats
