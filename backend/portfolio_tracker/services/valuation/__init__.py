# backend/portfolio_tracker/services/valuation/__init__.py
"""
Valuation package: holdings, net worth series, profit deltas and rankings.

Usage:
    from portfolio_tracker.services.valuation import ValuationService

    service = ValuationService()
    summary = service.get_valuation(db, portfolio_id=1)
    series = service.get_net_worth(db, user_id=1)

Architecture:
    valuation/
    ├── __init__.py      # Package exports
    ├── types.py         # Calculator inputs/outputs (dataclasses)
    ├── calculators.py   # HoldingsCalculator (ledger replay)
    ├── timeseries.py    # Net worth, monthly profit, net worth summary
    ├── ranking.py       # Top movers
    └── service.py       # ValuationService (database orchestration)

Data Flow:
    PortfolioItem rows → LedgerEntry ─┐
    Asset rows → AssetQuote ──────────┼→ HoldingsCalculator → ValuationSummary
                                      ├→ NetWorthCalculator → {name: [NetWorthPoint]}
                                      └→ TopMoversCalculator → TopMovers
    ProfitLog rows → ProfitObservation → MonthlyProfitCalculator / NetWorthSummaryCalculator
"""

from portfolio_tracker.services.valuation.calculators import (
    HoldingsCalculator,
    lenient_decimal_context,
)
from portfolio_tracker.services.valuation.ranking import TopMoversCalculator
from portfolio_tracker.services.valuation.service import ValuationService
from portfolio_tracker.services.valuation.timeseries import (
    MonthlyProfitCalculator,
    NetWorthCalculator,
    NetWorthSummaryCalculator,
)
from portfolio_tracker.services.valuation.types import (
    AssetQuote,
    Holding,
    HoldingState,
    LedgerEntry,
    MonthlyProfit,
    NetWorthPoint,
    NetWorthSummary,
    PortfolioLedger,
    ProfitObservation,
    RankedAsset,
    TopMovers,
    ValuationSummary,
)

__all__ = [
    "ValuationService",
    "HoldingsCalculator",
    "NetWorthCalculator",
    "MonthlyProfitCalculator",
    "NetWorthSummaryCalculator",
    "TopMoversCalculator",
    "lenient_decimal_context",
    "AssetQuote",
    "Holding",
    "HoldingState",
    "LedgerEntry",
    "MonthlyProfit",
    "NetWorthPoint",
    "NetWorthSummary",
    "PortfolioLedger",
    "ProfitObservation",
    "RankedAsset",
    "TopMovers",
    "ValuationSummary",
]
