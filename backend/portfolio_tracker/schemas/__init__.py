# backend/portfolio_tracker/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

Organized by domain:
- auth: Registration, login, user profile
- assets: Asset CRUD and batch price updates
- portfolios: Portfolio CRUD and stats
- portfolio_items: Ledger entries, holdings groups, ledger stats
- profit_logs: Daily snapshots, item stats, summary, trend
- statistics: Top movers, net worth summary, monthly profit
- valuation: Holdings, gains, net worth series
- market: Simulated market feed
- errors / pagination / validators: Shared building blocks

Usage:
    from portfolio_tracker.schemas import AssetCreate, AssetResponse
    from portfolio_tracker.schemas import PortfolioValuationResponse
"""

from portfolio_tracker.schemas.assets import (
    AssetBase,
    AssetCreate,
    AssetUpdate,
    AssetResponse,
    AssetListResponse,
    AssetPriceUpdate,
    AssetBatchPriceUpdateRequest,
    AssetBatchPriceUpdateResponse,
    AssetPriceUpdateResult,
)
from portfolio_tracker.schemas.auth import (
    UserRegisterRequest,
    UserLoginRequest,
    UserRoleUpdateRequest,
    TokenResponse,
    UserResponse,
    LoginResponse,
    MessageResponse,
)
from portfolio_tracker.schemas.errors import (
    ErrorDetail,
    ValidationErrorDetail,
)
from portfolio_tracker.schemas.market import (
    IndexQuoteResponse,
    RiseFallBucketResponse,
    RiseFallResponse,
    StockQuoteResponse,
    MarketAssetQuoteResponse,
)
from portfolio_tracker.schemas.pagination import (
    PaginationMeta,
    PaginatedResponse,
)
from portfolio_tracker.schemas.portfolio_items import (
    PortfolioItemCreate,
    PortfolioItemBatchCreate,
    PortfolioItemUpdate,
    PortfolioItemResponse,
    PortfolioItemListResponse,
    PortfolioItemBatchResponse,
    PortfolioItemStatsResponse,
    HoldingGroup,
    AssetTypeTradeStats,
)
from portfolio_tracker.schemas.portfolios import (
    PortfolioCreate,
    PortfolioUpdate,
    PortfolioResponse,
    PortfolioListResponse,
    PortfolioStats,
    PortfolioStatsResponse,
)
from portfolio_tracker.schemas.profit_logs import (
    ProfitLogCreate,
    ProfitLogBatchCreate,
    ProfitLogUpdate,
    ProfitLogResponse,
    ProfitLogListResponse,
    ProfitLogBatchResponse,
    ProfitLogItemStatsResponse,
    ProfitLogSummaryResponse,
    ProfitLogTrendResponse,
    ProfitBucket,
    ProfitTrendPoint,
)
from portfolio_tracker.schemas.statistics import (
    RankedAssetResponse,
    TopMoversResponse,
    UserSummaryResponse,
    MonthlyProfitPoint,
    MonthlyProfitResponse,
)
from portfolio_tracker.schemas.valuation import (
    HoldingResponse,
    PortfolioValuationResponse,
    NetWorthPointResponse,
    NetWorthResponse,
)

__all__ = [
    # Assets
    "AssetBase",
    "AssetCreate",
    "AssetUpdate",
    "AssetResponse",
    "AssetListResponse",
    "AssetPriceUpdate",
    "AssetBatchPriceUpdateRequest",
    "AssetBatchPriceUpdateResponse",
    "AssetPriceUpdateResult",
    # Auth
    "UserRegisterRequest",
    "UserLoginRequest",
    "UserRoleUpdateRequest",
    "TokenResponse",
    "UserResponse",
    "LoginResponse",
    "MessageResponse",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Market
    "IndexQuoteResponse",
    "RiseFallBucketResponse",
    "RiseFallResponse",
    "StockQuoteResponse",
    "MarketAssetQuoteResponse",
    # Pagination
    "PaginationMeta",
    "PaginatedResponse",
    # Portfolio items
    "PortfolioItemCreate",
    "PortfolioItemBatchCreate",
    "PortfolioItemUpdate",
    "PortfolioItemResponse",
    "PortfolioItemListResponse",
    "PortfolioItemBatchResponse",
    "PortfolioItemStatsResponse",
    "HoldingGroup",
    "AssetTypeTradeStats",
    # Portfolios
    "PortfolioCreate",
    "PortfolioUpdate",
    "PortfolioResponse",
    "PortfolioListResponse",
    "PortfolioStats",
    "PortfolioStatsResponse",
    # Profit logs
    "ProfitLogCreate",
    "ProfitLogBatchCreate",
    "ProfitLogUpdate",
    "ProfitLogResponse",
    "ProfitLogListResponse",
    "ProfitLogBatchResponse",
    "ProfitLogItemStatsResponse",
    "ProfitLogSummaryResponse",
    "ProfitLogTrendResponse",
    "ProfitBucket",
    "ProfitTrendPoint",
    # Statistics
    "RankedAssetResponse",
    "TopMoversResponse",
    "UserSummaryResponse",
    "MonthlyProfitPoint",
    "MonthlyProfitResponse",
    # Valuation
    "HoldingResponse",
    "PortfolioValuationResponse",
    "NetWorthPointResponse",
    "NetWorthResponse",
]
