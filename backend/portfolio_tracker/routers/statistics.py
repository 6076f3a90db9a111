# backend/portfolio_tracker/routers/statistics.py
"""
Statistics endpoints.

- GET /statistics/assets/top: best performing stocks and bonds
- GET /statistics/users/{user_id}/summary: net worth per asset type now,
  the previous day and at the previous month-end
- GET /statistics/users/{user_id}/monthly-profit: month-over-month profit
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_valuation_service
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_STATISTICS, limiter
from portfolio_tracker.schemas.statistics import (
    MonthlyProfitPoint,
    MonthlyProfitResponse,
    RankedAssetResponse,
    TopMoversResponse,
    UserSummaryResponse,
)
from portfolio_tracker.services.constants import (
    DEFAULT_PROFIT_MONTHS,
    DEFAULT_TOP_MOVERS_LIMIT,
    MAX_PROFIT_MONTHS,
    MAX_TOP_MOVERS_LIMIT,
)
from portfolio_tracker.services.valuation import ValuationService

router = APIRouter(
    prefix="/statistics",
    tags=["Statistics"],
)


@router.get(
    "/assets/top",
    response_model=TopMoversResponse,
    summary="Top movers by period growth",
)
@limiter.limit(RATE_LIMIT_STATISTICS)
def get_top_assets(
        request: Request,  # Required for rate limiting
        db: Session = Depends(get_db),
        service: ValuationService = Depends(get_valuation_service),
        limit: int = Query(
            default=DEFAULT_TOP_MOVERS_LIMIT,
            ge=1,
            le=MAX_TOP_MOVERS_LIMIT,
            description="Entries per list",
        ),
) -> TopMoversResponse:
    """
    Rank live stocks and bonds by growth over their stored price history
    (last / first - 1). Assets with fewer than two prices are left out.
    """
    movers = service.get_top_movers(db, limit)

    return TopMoversResponse(
        top_stocks=[RankedAssetResponse.model_validate(r) for r in movers.top_stocks],
        top_bonds=[RankedAssetResponse.model_validate(r) for r in movers.top_bonds],
    )


@router.get(
    "/users/{user_id}/summary",
    response_model=UserSummaryResponse,
    summary="Net worth summary of a user",
)
@limiter.limit(RATE_LIMIT_STATISTICS)
def get_user_summary(
        request: Request,  # Required for rate limiting
        user_id: int,
        db: Session = Depends(get_db),
        service: ValuationService = Depends(get_valuation_service),
) -> UserSummaryResponse:
    """
    Values come from profit logs summed per asset type; total_investment
    is the sum of buy amounts minus the sum of sell amounts.

    Raises **404** if the user does not exist.
    """
    summary = service.get_summary(db, user_id)

    return UserSummaryResponse(
        user_id=user_id,
        as_of=summary.as_of,
        current=summary.current,
        yesterday=summary.yesterday,
        month_start=summary.month_start,
        total_investment=summary.total_investment,
    )


@router.get(
    "/users/{user_id}/monthly-profit",
    response_model=MonthlyProfitResponse,
    summary="Month-over-month profit of a user",
)
@limiter.limit(RATE_LIMIT_STATISTICS)
def get_user_monthly_profit(
        request: Request,  # Required for rate limiting
        user_id: int,
        db: Session = Depends(get_db),
        service: ValuationService = Depends(get_valuation_service),
        months: int = Query(
            default=DEFAULT_PROFIT_MONTHS,
            ge=1,
            le=MAX_PROFIT_MONTHS,
            description="Number of months ending with the current month",
        ),
) -> MonthlyProfitResponse:
    """
    For each asset type: the latest value within each month, differenced
    against the previous month. The first month is always 0.

    Raises **404** if the user does not exist.
    """
    series = service.get_monthly_profit(db, user_id, months)

    return MonthlyProfitResponse(
        user_id=user_id,
        months=months,
        series={
            asset_type: [MonthlyProfitPoint.model_validate(p) for p in points]
            for asset_type, points in series.items()
        },
    )
