# backend/portfolio_tracker/routers/valuation.py
"""
Valuation endpoints.

- GET /portfolios/{portfolio_id}/valuation: holdings, gains and totals
- GET /users/{user_id}/net-worth: net worth series of every portfolio

Both are read-only views computed on demand from the live ledger and the
current asset prices; nothing is cached or stored.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_valuation_service
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_STATISTICS, limiter
from portfolio_tracker.models import Portfolio
from portfolio_tracker.schemas.valuation import (
    HoldingResponse,
    NetWorthPointResponse,
    NetWorthResponse,
    PortfolioValuationResponse,
)
from portfolio_tracker.services.valuation import ValuationService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(tags=["Valuation"])


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/portfolios/{portfolio_id}/valuation",
    response_model=PortfolioValuationResponse,
    summary="Value a portfolio",
)
@limiter.limit(RATE_LIMIT_STATISTICS)
def get_portfolio_valuation(
        request: Request,  # Required for rate limiting
        portfolio_id: int,
        db: Session = Depends(get_db),
        service: ValuationService = Depends(get_valuation_service),
) -> PortfolioValuationResponse:
    """
    Replay the portfolio's ledger in insertion order against current prices.

    - **long** holdings: unrealized = (price - avg cost) x quantity
    - **short** holdings: unrealized = (avg cost - price) x |quantity|
    - **closed** holdings keep only their realized gain

    Trades of assets that do not exist (or were deleted) are skipped and
    listed in `skipped_asset_codes`.

    Raises **404** if the portfolio does not exist or was deleted.
    """
    summary = service.get_valuation(db, portfolio_id)
    portfolio = db.get(Portfolio, portfolio_id)

    return PortfolioValuationResponse(
        portfolio_id=portfolio_id,
        portfolio_name=portfolio.name,
        holdings=[HoldingResponse.model_validate(h) for h in summary.holdings],
        realized_gain=summary.realized_gain,
        unrealized_gain=summary.unrealized_gain,
        total_value=summary.total_value,
        total_cost=summary.total_cost,
        total_gain=summary.total_gain,
        total_gain_percent=summary.total_gain_percent,
        skipped_asset_codes=list(summary.skipped_asset_codes),
    )


@router.get(
    "/users/{user_id}/net-worth",
    response_model=NetWorthResponse,
    summary="Net worth series of a user's portfolios",
)
@limiter.limit(RATE_LIMIT_STATISTICS)
def get_user_net_worth(
        request: Request,  # Required for rate limiting
        user_id: int,
        db: Session = Depends(get_db),
        service: ValuationService = Depends(get_valuation_service),
) -> NetWorthResponse:
    """
    One series per portfolio name over a shared time axis: the longest
    price history among the assets bought in any of the portfolios.

    Histories are combined by position, not by calendar date, and sells
    are not subtracted. Portfolios sharing a name collapse into the last
    one.

    Raises **404** if the user does not exist.
    """
    series = service.get_net_worth(db, user_id)

    return NetWorthResponse(
        user_id=user_id,
        series={
            name: [NetWorthPointResponse.model_validate(p) for p in points]
            for name, points in series.items()
        },
    )
