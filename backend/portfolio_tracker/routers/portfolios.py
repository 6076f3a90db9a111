# backend/portfolio_tracker/routers/portfolios.py
"""
Portfolio management endpoints.

Each portfolio belongs to one user and owns its ledger (portfolio items).
Reads are public; creating, renaming and deleting need a bearer token, and
only the owner may modify a portfolio. Deleting flags the portfolio
(is_deleted) so its ledger stays in the database but leaves every
computation.
"""

from collections import Counter
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_current_user, get_portfolio_with_owner_check
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_WRITE, limiter
from portfolio_tracker.models import Portfolio, PortfolioItem, TradeType, User
from portfolio_tracker.schemas.pagination import PaginationMeta
from portfolio_tracker.schemas.portfolios import (
    PortfolioCreate,
    PortfolioListResponse,
    PortfolioResponse,
    PortfolioStats,
    PortfolioStatsResponse,
    PortfolioUpdate,
)
from portfolio_tracker.services.constants import MAX_LIST_LIMIT
from portfolio_tracker.utils.sql import LIKE_ESCAPE_CHAR, contains_pattern

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/portfolios",
    tags=["Portfolios"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_portfolio_or_404(db: Session, portfolio_id: int) -> Portfolio:
    """
    Fetch a live portfolio by ID or raise 404.
    """
    portfolio = db.get(Portfolio, portfolio_id)

    if portfolio is None or portfolio.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio with id {portfolio_id} not found"
        )

    return portfolio


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "/",
    response_model=PortfolioResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new portfolio",
    response_description="The created portfolio"
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_portfolio(
        request: Request,  # Required for rate limiting
        portfolio: PortfolioCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> Portfolio:
    """
    Create a portfolio owned by the authenticated user.

    A user can hold several portfolios (e.g., "Retirement", "Trading").
    Names are not unique, but the net worth series is keyed by name, so
    same-named portfolios share one series.
    """
    db_portfolio = Portfolio(user_id=current_user.id, name=portfolio.name)

    db.add(db_portfolio)
    db.commit()
    db.refresh(db_portfolio)

    return db_portfolio


@router.get(
    "/",
    response_model=PortfolioListResponse,
    summary="List portfolios",
    response_description="List of portfolios matching the filters"
)
def list_portfolios(
        db: Session = Depends(get_db),
        user_id: int | None = Query(default=None, description="Filter by owner"),
        name: str | None = Query(default=None, max_length=100, description="Search in portfolio name"),
        skip: int = Query(default=0, ge=0, description="Number of records to skip"),
        limit: int = Query(default=100, ge=1, le=MAX_LIST_LIMIT, description="Maximum records to return"),
) -> PortfolioListResponse:
    """
    Live portfolios, newest first.

    - **user_id**: portfolios of one user
    - **name**: case-insensitive substring of the name
    """
    query = select(Portfolio).where(Portfolio.is_deleted.is_(False))

    if user_id is not None:
        query = query.where(Portfolio.user_id == user_id)

    if name:
        query = query.where(Portfolio.name.ilike(contains_pattern(name), escape=LIKE_ESCAPE_CHAR))

    query = query.order_by(Portfolio.created_at.desc(), Portfolio.id.desc())

    total = db.scalar(select(func.count()).select_from(query.subquery()))
    portfolios = db.scalars(query.offset(skip).limit(limit)).all()

    return PortfolioListResponse(
        items=list(portfolios),
        pagination=PaginationMeta.create(total=total, skip=skip, limit=limit),
    )


@router.get(
    "/user/{user_id}",
    response_model=list[PortfolioResponse],
    summary="List the portfolios of a user",
)
def list_user_portfolios(
        user_id: int,
        db: Session = Depends(get_db),
) -> list[Portfolio]:
    """All live portfolios of one user, oldest first (empty for unknown users)."""
    query = (
        select(Portfolio)
        .where(Portfolio.user_id == user_id, Portfolio.is_deleted.is_(False))
        .order_by(Portfolio.id)
    )
    return list(db.scalars(query).all())


@router.get(
    "/{portfolio_id}",
    response_model=PortfolioResponse,
    summary="Get a portfolio by ID",
    response_description="The requested portfolio"
)
def get_portfolio(
        portfolio_id: int,
        db: Session = Depends(get_db)
) -> Portfolio:
    """
    Retrieve a single portfolio by its ID.

    Raises **404** if the portfolio does not exist or was deleted.
    """
    return get_portfolio_or_404(db, portfolio_id)


@router.patch(
    "/{portfolio_id}",
    response_model=PortfolioResponse,
    summary="Update a portfolio",
    response_description="The updated portfolio"
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_portfolio(
        request: Request,  # Required for rate limiting
        portfolio_update: PortfolioUpdate,
        db_portfolio: Annotated[Portfolio, Depends(get_portfolio_with_owner_check)],
        db: Session = Depends(get_db),
) -> Portfolio:
    """
    Rename a portfolio (owner only).

    Raises **404** if missing, **403** if owned by someone else.
    """
    update_data = portfolio_update.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        setattr(db_portfolio, field, value)

    db.commit()
    db.refresh(db_portfolio)

    return db_portfolio


@router.delete(
    "/{portfolio_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a portfolio",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_portfolio(
        request: Request,  # Required for rate limiting
        db_portfolio: Annotated[Portfolio, Depends(get_portfolio_with_owner_check)],
        db: Session = Depends(get_db),
) -> None:
    """
    Soft delete a portfolio (owner only).

    Its items and profit logs are kept but no longer counted anywhere.
    """
    db_portfolio.is_deleted = True
    db.commit()

    return None


@router.get(
    "/{portfolio_id}/stats",
    response_model=PortfolioStatsResponse,
    summary="Ledger counts of a portfolio",
)
def get_portfolio_stats(
        portfolio_id: int,
        db: Session = Depends(get_db),
) -> PortfolioStatsResponse:
    """
    Entry counts per side and per asset type, plus the plain sum of amounts.
    """
    portfolio = get_portfolio_or_404(db, portfolio_id)

    items = db.scalars(
        select(PortfolioItem).where(
            PortfolioItem.portfolio_id == portfolio_id,
            PortfolioItem.is_deleted.is_(False),
        )
    ).all()

    asset_types = Counter(item.asset_type.value for item in items)
    stats = PortfolioStats(
        total_items=len(items),
        total_amount=sum((Decimal(str(item.amount)) for item in items), Decimal("0")),
        asset_types=dict(asset_types),
        buy_count=sum(1 for item in items if item.type == TradeType.BUY),
        sell_count=sum(1 for item in items if item.type == TradeType.SELL),
    )

    return PortfolioStatsResponse(
        portfolio=PortfolioResponse.model_validate(portfolio),
        stats=stats,
    )
