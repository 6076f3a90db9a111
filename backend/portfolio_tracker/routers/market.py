# backend/portfolio_tracker/routers/market.py
"""
Simulated market feed for the dashboard.

Every call draws fresh random quotes from the shared MarketSimulator;
nothing is persisted.
"""

from fastapi import APIRouter, Depends, Request

from portfolio_tracker.dependencies import get_market_simulator
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_DEFAULT, limiter
from portfolio_tracker.schemas.market import (
    IndexQuoteResponse,
    MarketAssetQuoteResponse,
    RiseFallBucketResponse,
    RiseFallResponse,
    StockQuoteResponse,
)
from portfolio_tracker.services.market_simulation import MarketSimulator

router = APIRouter(
    prefix="/market",
    tags=["Market"],
)


@router.get(
    "/indices",
    response_model=list[IndexQuoteResponse],
    summary="Intraday trend of the major indices",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_indices(
        request: Request,  # Required for rate limiting
        simulator: MarketSimulator = Depends(get_market_simulator),
) -> list[IndexQuoteResponse]:
    """S&P 500, NASDAQ, DOW and VIX as 24-point random walks."""
    return [IndexQuoteResponse.model_validate(q) for q in simulator.indices()]


@router.get(
    "/rise-fall",
    response_model=RiseFallResponse,
    summary="Distribution of daily moves",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_rise_fall(
        request: Request,  # Required for rate limiting
        simulator: MarketSimulator = Depends(get_market_simulator),
) -> RiseFallResponse:
    """Number of stocks per move band, from Lim Down to Lim Up."""
    return RiseFallResponse(
        histogram=[RiseFallBucketResponse.model_validate(b) for b in simulator.rise_fall()],
    )


@router.get(
    "/stocks",
    response_model=list[StockQuoteResponse],
    summary="Large-cap stock quotes",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_stocks(
        request: Request,  # Required for rate limiting
        simulator: MarketSimulator = Depends(get_market_simulator),
) -> list[StockQuoteResponse]:
    return [StockQuoteResponse.model_validate(q) for q in simulator.stocks()]


@router.get(
    "/assets",
    response_model=list[MarketAssetQuoteResponse],
    summary="Stock and bond quotes",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_assets(
        request: Request,  # Required for rate limiting
        simulator: MarketSimulator = Depends(get_market_simulator),
) -> list[MarketAssetQuoteResponse]:
    """Bonds move with a much lower volatility than stocks."""
    return [MarketAssetQuoteResponse.model_validate(q) for q in simulator.assets()]
