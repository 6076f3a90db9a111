# backend/portfolio_tracker/services/__init__.py
"""
Service layer for business logic.

Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions (see exceptions.py)
- Receive database sessions as parameters (not via Depends)

Usage:
    from portfolio_tracker.services import ValuationService
    from portfolio_tracker.services import ProfitLogService, MarketSimulator
    from portfolio_tracker.services import PortfolioNotFoundError

Architecture:
    services/
    ├── __init__.py           # This file - main exports
    ├── exceptions.py         # Domain exceptions
    ├── constants.py          # Business constants and limits
    ├── market_simulation.py  # Random-walk market feed
    ├── profit_logs.py        # Profit log statistics
    ├── auth/                 # Passwords, JWT, login/logout
    └── valuation/            # Valuation engine
        ├── service.py        # Orchestrator (database -> calculators)
        ├── types.py          # Calculator inputs and outputs
        ├── calculators.py    # Holdings and gains
        ├── timeseries.py     # Net worth series, monthly profit, summary
        └── ranking.py        # Top movers
"""

from portfolio_tracker.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidGroupingError,
    NotFoundError,
    PortfolioNotFoundError,
    PortfolioItemNotFoundError,
    ProfitLogNotFoundError,
    AssetNotFoundError,
    UserNotFoundError,
    ConflictError,
    UserExistsError,
    AssetExistsError,
    ProfitLogExistsError,
    AuthenticationError,
    InvalidCredentialsError,
    TokenExpiredError,
    AuthorizationError,
    PermissionDeniedError,
)
from portfolio_tracker.services.market_simulation import MarketSimulator
from portfolio_tracker.services.profit_logs import ProfitLogAggregator, ProfitLogService
from portfolio_tracker.services.valuation import ValuationService

__all__ = [
    # Services
    "ValuationService",
    "ProfitLogAggregator",
    "ProfitLogService",
    "MarketSimulator",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidGroupingError",
    "NotFoundError",
    "PortfolioNotFoundError",
    "PortfolioItemNotFoundError",
    "ProfitLogNotFoundError",
    "AssetNotFoundError",
    "UserNotFoundError",
    "ConflictError",
    "UserExistsError",
    "AssetExistsError",
    "ProfitLogExistsError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "AuthorizationError",
    "PermissionDeniedError",
]
