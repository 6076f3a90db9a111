# backend/portfolio_tracker/schemas/profit_logs.py
"""
Pydantic schemas for profit logs.

A profit log is the daily snapshot of one portfolio item: its market value
and its profit on that date. At most one live log exists per (item, date).
"""

import datetime as dt
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from portfolio_tracker.schemas.pagination import PaginationMeta


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class ProfitLogCreate(BaseModel):
    item_id: int = Field(..., gt=0, description="Portfolio item the snapshot belongs to")
    date: dt.date = Field(..., description="Snapshot date")
    value: Decimal = Field(..., max_digits=15, decimal_places=2, description="Market value")
    profit: Decimal = Field(..., max_digits=15, decimal_places=2, description="Profit on that date")


class ProfitLogBatchCreate(BaseModel):
    logs: list[ProfitLogCreate] = Field(..., min_length=1, max_length=500)


class ProfitLogUpdate(BaseModel):
    """Correct a snapshot. The item and date are fixed."""

    value: Decimal | None = Field(default=None, max_digits=15, decimal_places=2)
    profit: Decimal | None = Field(default=None, max_digits=15, decimal_places=2)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class ProfitLogResponse(BaseModel):
    id: int
    item_id: int
    date: dt.date
    value: Decimal
    profit: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfitLogListResponse(BaseModel):
    items: list[ProfitLogResponse] = Field(..., description="Logs of the current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")


class ProfitLogBatchResponse(BaseModel):
    message: str = Field(default="Batch create completed")
    logs: list[ProfitLogResponse]


class ProfitTrendPoint(BaseModel):
    date: dt.date
    profit: Decimal
    value: Decimal


class ProfitLogItemStatsResponse(BaseModel):
    """Profit statistics of a single portfolio item; all zeros without logs."""

    item_id: int
    total_logs: int
    total_profit: Decimal
    avg_profit: Decimal
    max_profit: Decimal
    min_profit: Decimal
    latest_value: Decimal = Field(..., description="Value of the most recent log")
    profit_trend: list[ProfitTrendPoint] = Field(default_factory=list, description="Oldest first")


class ProfitBucket(BaseModel):
    """Summed profit and value of the logs sharing one key."""

    key: str = Field(..., description="ISO date, item id, or period label")
    profit: Decimal
    value: Decimal
    count: int


class ProfitLogSummaryResponse(BaseModel):
    total_logs: int
    total_profit: Decimal
    total_value: Decimal
    avg_profit: Decimal
    profit_by_date: list[ProfitBucket] = Field(default_factory=list)
    item_stats: list[ProfitBucket] = Field(default_factory=list)


class ProfitLogTrendResponse(BaseModel):
    group_by: Literal["day", "week", "month"]
    trend: list[ProfitBucket] = Field(default_factory=list, description="Sorted by period")
