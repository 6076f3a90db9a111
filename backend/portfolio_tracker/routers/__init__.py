# backend/portfolio_tracker/routers/__init__.py
"""
API routers for the portfolio tracker.

Each router handles a specific domain:
- users: Registration, login/logout and roles
- assets: Asset registry with price histories (admin writes)
- portfolios: User portfolio management
- portfolio_items: Buy/sell ledger entries
- profit_logs: Daily value and profit snapshots per item
- valuation: Portfolio valuation and net worth series
- statistics: Top movers, net worth summary, monthly profit
- market: Simulated market feed
"""

from portfolio_tracker.routers.assets import router as assets_router
from portfolio_tracker.routers.market import router as market_router
from portfolio_tracker.routers.portfolio_items import router as portfolio_items_router
from portfolio_tracker.routers.portfolios import router as portfolios_router
from portfolio_tracker.routers.profit_logs import router as profit_logs_router
from portfolio_tracker.routers.statistics import router as statistics_router
from portfolio_tracker.routers.users import router as users_router
from portfolio_tracker.routers.valuation import router as valuation_router

__all__ = [
    "users_router",
    "assets_router",
    "portfolios_router",
    "portfolio_items_router",
    "profit_logs_router",
    "valuation_router",
    "statistics_router",
    "market_router",
]
