# backend/portfolio_tracker/routers/portfolio_items.py
"""
Portfolio item (ledger entry) endpoints.

A portfolio item records one buy or sell. Items are processed by the
valuation engine in insertion order, so corrections go through PATCH
rather than delete-and-recreate when the position in the ledger matters.

Reads are public; writes need a bearer token and ownership of the
target portfolio.
"""

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_current_user
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_WRITE, limiter
from portfolio_tracker.models import AssetType, Portfolio, PortfolioItem, TradeType, User
from portfolio_tracker.schemas.pagination import PaginationMeta
from portfolio_tracker.schemas.portfolio_items import (
    AssetTypeTradeStats,
    HoldingGroup,
    PortfolioItemBatchCreate,
    PortfolioItemBatchResponse,
    PortfolioItemCreate,
    PortfolioItemListResponse,
    PortfolioItemResponse,
    PortfolioItemStatsResponse,
    PortfolioItemUpdate,
)
from portfolio_tracker.schemas.validators import normalize_asset_code
from portfolio_tracker.services.constants import DEFAULT_PAGE_SIZE, MAX_LIST_LIMIT, ZERO

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/portfolio-items",
    tags=["Portfolio Items"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_item_or_404(db: Session, item_id: int) -> PortfolioItem:
    """Fetch a live item by ID or raise 404."""
    item = db.get(PortfolioItem, item_id)

    if item is None or item.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio item with id {item_id} not found"
        )

    return item


def get_owned_portfolio(db: Session, portfolio_id: int, user: User) -> Portfolio:
    """
    Fetch a live portfolio and check it belongs to user.

    Raises:
        HTTPException 404: Missing or deleted portfolio
        HTTPException 403: Portfolio owned by someone else
    """
    portfolio = db.get(Portfolio, portfolio_id)

    if portfolio is None or portfolio.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio with id {portfolio_id} not found"
        )

    if portfolio.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this portfolio",
        )

    return portfolio


def get_live_portfolio_or_404(db: Session, portfolio_id: int) -> Portfolio:
    portfolio = db.get(Portfolio, portfolio_id)
    if portfolio is None or portfolio.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio with id {portfolio_id} not found"
        )
    return portfolio


def fetch_live_items(db: Session, portfolio_id: int) -> list[PortfolioItem]:
    query = (
        select(PortfolioItem)
        .where(PortfolioItem.portfolio_id == portfolio_id, PortfolioItem.is_deleted.is_(False))
        .order_by(PortfolioItem.id)
    )
    return list(db.scalars(query).all())


# =============================================================================
# READ ENDPOINTS
# =============================================================================

@router.get(
    "/search",
    response_model=PortfolioItemListResponse,
    summary="Search portfolio items",
)
def search_items(
        db: Session = Depends(get_db),
        portfolio_id: int | None = Query(default=None, description="Filter by portfolio"),
        asset_code: str | None = Query(default=None, max_length=50, description="Exact asset code"),
        asset_type: AssetType | None = Query(default=None),
        type: TradeType | None = Query(default=None, description="buy or sell"),
        min_amount: Decimal | None = Query(default=None, description="Minimum amount (inclusive)"),
        max_amount: Decimal | None = Query(default=None, description="Maximum amount (inclusive)"),
        start_date: date | None = Query(default=None, description="Earliest purchase date"),
        end_date: date | None = Query(default=None, description="Latest purchase date"),
        skip: int = Query(default=0, ge=0),
        limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_LIST_LIMIT),
) -> PortfolioItemListResponse:
    """Paged search over live items, most recent purchase first."""
    query = select(PortfolioItem).where(PortfolioItem.is_deleted.is_(False))

    if portfolio_id is not None:
        query = query.where(PortfolioItem.portfolio_id == portfolio_id)
    if asset_code:
        query = query.where(PortfolioItem.asset_code == normalize_asset_code(asset_code))
    if asset_type is not None:
        query = query.where(PortfolioItem.asset_type == asset_type)
    if type is not None:
        query = query.where(PortfolioItem.type == type)
    if min_amount is not None:
        query = query.where(PortfolioItem.amount >= min_amount)
    if max_amount is not None:
        query = query.where(PortfolioItem.amount <= max_amount)
    if start_date is not None:
        query = query.where(PortfolioItem.purchase_date >= start_date)
    if end_date is not None:
        query = query.where(PortfolioItem.purchase_date <= end_date)

    query = query.order_by(PortfolioItem.purchase_date.desc(), PortfolioItem.id.desc())

    total = db.scalar(select(func.count()).select_from(query.subquery()))
    items = db.scalars(query.offset(skip).limit(limit)).all()

    return PortfolioItemListResponse(
        items=list(items),
        pagination=PaginationMeta.create(total=total, skip=skip, limit=limit),
    )


@router.get(
    "/portfolio/{portfolio_id}",
    response_model=list[PortfolioItemResponse],
    summary="Ledger of a portfolio",
)
def list_portfolio_items(
        portfolio_id: int,
        db: Session = Depends(get_db),
) -> list[PortfolioItem]:
    """Live items of a portfolio in ledger (insertion) order."""
    get_live_portfolio_or_404(db, portfolio_id)
    return fetch_live_items(db, portfolio_id)


@router.get(
    "/portfolio/{portfolio_id}/holdings",
    response_model=list[HoldingGroup],
    summary="Net position per asset code",
)
def get_portfolio_holdings(
        portfolio_id: int,
        db: Session = Depends(get_db),
) -> list[HoldingGroup]:
    """
    Plain buy/sell sums grouped by asset code.

    Unlike the valuation endpoint this needs no prices: it only nets
    quantities and amounts. Groups are sorted by asset code; each group
    lists its entries newest first.
    """
    get_live_portfolio_or_404(db, portfolio_id)
    items = sorted(
        fetch_live_items(db, portfolio_id),
        key=lambda i: (i.asset_code, -i.purchase_date.toordinal(), -i.id),
    )

    groups: dict[str, dict] = {}
    for item in items:
        group = groups.setdefault(item.asset_code, {
            "asset_code": item.asset_code,
            "asset_type": item.asset_type,
            "buy_quantity": ZERO,
            "sell_quantity": ZERO,
            "buy_amount": ZERO,
            "sell_amount": ZERO,
            "transactions": [],
        })
        quantity = Decimal(str(item.quantity))
        amount = Decimal(str(item.amount))
        if item.type == TradeType.BUY:
            group["buy_quantity"] += quantity
            group["buy_amount"] += amount
        else:
            group["sell_quantity"] += quantity
            group["sell_amount"] += amount
        group["transactions"].append(PortfolioItemResponse.model_validate(item))

    return [
        HoldingGroup(
            **group,
            total_quantity=group["buy_quantity"] - group["sell_quantity"],
            total_amount=group["buy_amount"] - group["sell_amount"],
        )
        for group in groups.values()
    ]


@router.get(
    "/portfolio/{portfolio_id}/stats",
    response_model=PortfolioItemStatsResponse,
    summary="Ledger statistics of a portfolio",
)
def get_portfolio_item_stats(
        portfolio_id: int,
        db: Session = Depends(get_db),
) -> PortfolioItemStatsResponse:
    get_live_portfolio_or_404(db, portfolio_id)
    items = fetch_live_items(db, portfolio_id)

    buys = [i for i in items if i.type == TradeType.BUY]
    sells = [i for i in items if i.type == TradeType.SELL]

    counts: Counter = Counter()
    amounts: dict[tuple[AssetType, TradeType], Decimal] = {}
    for item in items:
        key = (item.asset_type, item.type)
        counts[key] += 1
        amounts[key] = amounts.get(key, ZERO) + Decimal(str(item.amount))

    def total(rows: list[PortfolioItem], attr: str) -> Decimal:
        return sum((Decimal(str(getattr(row, attr))) for row in rows), ZERO)

    return PortfolioItemStatsResponse(
        total_items=len(items),
        total_buy_amount=total(buys, "amount"),
        total_sell_amount=total(sells, "amount"),
        buy_count=len(buys),
        sell_count=len(sells),
        total_quantity=total(buys, "quantity") - total(sells, "quantity"),
        asset_types=[
            AssetTypeTradeStats(asset_type=asset_type, type=side, count=counts[(asset_type, side)], amount=amount)
            for (asset_type, side), amount in amounts.items()
        ],
    )


@router.get(
    "/{item_id}",
    response_model=PortfolioItemResponse,
    summary="Get a portfolio item by ID",
)
def get_item(
        item_id: int,
        db: Session = Depends(get_db),
) -> PortfolioItem:
    return get_item_or_404(db, item_id)


# =============================================================================
# WRITE ENDPOINTS
# =============================================================================

@router.post(
    "/",
    response_model=PortfolioItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a trade",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_item(
        request: Request,  # Required for rate limiting
        item: PortfolioItemCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> PortfolioItem:
    """
    Append a buy or sell to a portfolio the caller owns.

    The asset code is not checked against the asset registry; trades of
    unknown assets are skipped by valuation until the asset exists.
    """
    get_owned_portfolio(db, item.portfolio_id, current_user)

    db_item = PortfolioItem(**item.model_dump())
    db.add(db_item)
    db.commit()
    db.refresh(db_item)

    return db_item


@router.post(
    "/batch",
    response_model=PortfolioItemBatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record several trades",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_items_batch(
        request: Request,  # Required for rate limiting
        data: PortfolioItemBatchCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> PortfolioItemBatchResponse:
    """
    All-or-nothing: every target portfolio must exist and belong to the
    caller. Entries are appended in request order.
    """
    for portfolio_id in dict.fromkeys(item.portfolio_id for item in data.items):
        get_owned_portfolio(db, portfolio_id, current_user)

    db_items = [PortfolioItem(**item.model_dump()) for item in data.items]
    db.add_all(db_items)
    db.commit()
    for db_item in db_items:
        db.refresh(db_item)

    return PortfolioItemBatchResponse(
        items=[PortfolioItemResponse.model_validate(db_item) for db_item in db_items],
    )


@router.patch(
    "/{item_id}",
    response_model=PortfolioItemResponse,
    summary="Correct a trade",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_item(
        request: Request,  # Required for rate limiting
        item_id: int,
        item_update: PortfolioItemUpdate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> PortfolioItem:
    """Partial update; the entry keeps its place in the ledger."""
    db_item = get_item_or_404(db, item_id)
    get_owned_portfolio(db, db_item.portfolio_id, current_user)

    update_data = item_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_item, field, value)

    db.commit()
    db.refresh(db_item)

    return db_item


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a trade",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_item(
        request: Request,  # Required for rate limiting
        item_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> None:
    """Soft delete: the trade no longer counts in any valuation."""
    db_item = get_item_or_404(db, item_id)
    get_owned_portfolio(db, db_item.portfolio_id, current_user)

    db_item.is_deleted = True
    db.commit()

    return None
