# backend/portfolio_tracker/routers/profit_logs.py
"""
Profit log endpoints.

A profit log is the daily (value, profit) snapshot of one portfolio item.
Beside CRUD, the router exposes three aggregations computed by
ProfitLogService: per-item stats, a filtered summary, and a trend grouped
by day, week or month.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_current_user, get_profit_log_service
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_WRITE, limiter
from portfolio_tracker.models import Portfolio, PortfolioItem, ProfitLog, User
from portfolio_tracker.schemas.pagination import PaginationMeta
from portfolio_tracker.schemas.profit_logs import (
    ProfitBucket,
    ProfitLogBatchCreate,
    ProfitLogBatchResponse,
    ProfitLogCreate,
    ProfitLogItemStatsResponse,
    ProfitLogListResponse,
    ProfitLogResponse,
    ProfitLogSummaryResponse,
    ProfitLogTrendResponse,
    ProfitLogUpdate,
    ProfitTrendPoint,
)
from portfolio_tracker.schemas.validators import validate_date_range
from portfolio_tracker.services.constants import DEFAULT_PAGE_SIZE, MAX_LIST_LIMIT
from portfolio_tracker.services.exceptions import ProfitLogExistsError, ValidationError
from portfolio_tracker.services.profit_logs import ProfitLogService

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/profit-logs",
    tags=["Profit Logs"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_log_or_404(db: Session, log_id: int) -> ProfitLog:
    log = db.get(ProfitLog, log_id)

    if log is None or log.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Profit log with id {log_id} not found"
        )

    return log


def get_owned_item(db: Session, item_id: int, user: User) -> PortfolioItem:
    """
    Fetch a live item whose live portfolio belongs to user.

    Raises:
        HTTPException 404: Missing or deleted item or portfolio
        HTTPException 403: Item of another user's portfolio
    """
    item = db.get(PortfolioItem, item_id)
    portfolio = db.get(Portfolio, item.portfolio_id) if item is not None else None

    if item is None or item.is_deleted or portfolio is None or portfolio.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio item with id {item_id} not found"
        )

    if portfolio.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this portfolio item",
        )

    return item


def parse_item_ids(item_ids: str | None) -> list[int] | None:
    """
    Parse a comma separated id list ("1,2,3").

    Raises:
        ValidationError: If an entry is not an integer
    """
    if not item_ids:
        return None
    try:
        return [int(part) for part in item_ids.split(",") if part.strip()]
    except ValueError:
        raise ValidationError(f"Invalid item_ids: '{item_ids}'", field="item_ids")


def check_date_range(start_date: date | None, end_date: date | None) -> None:
    try:
        validate_date_range(start_date, end_date)
    except ValueError as e:
        raise ValidationError(str(e), field="start_date")


def store_log(db: Session, data: ProfitLogCreate) -> ProfitLog:
    """
    Insert a log, reviving a soft-deleted row for the same (item, date).

    The (item_id, date) pair is unique across live and deleted rows.

    Raises:
        ProfitLogExistsError: A live log already exists for that date
    """
    existing = db.scalars(
        select(ProfitLog).where(ProfitLog.item_id == data.item_id, ProfitLog.date == data.date)
    ).first()

    if existing is not None and not existing.is_deleted:
        raise ProfitLogExistsError(data.item_id, data.date)

    if existing is not None:
        existing.value = data.value
        existing.profit = data.profit
        existing.is_deleted = False
        return existing

    log = ProfitLog(**data.model_dump())
    db.add(log)
    return log


# =============================================================================
# SEARCH & AGGREGATIONS
# =============================================================================

@router.get(
    "/search",
    response_model=ProfitLogListResponse,
    summary="Search profit logs",
)
def search_logs(
        db: Session = Depends(get_db),
        item_id: int | None = Query(default=None),
        start_date: date | None = Query(default=None),
        end_date: date | None = Query(default=None),
        min_profit: Decimal | None = Query(default=None),
        max_profit: Decimal | None = Query(default=None),
        min_value: Decimal | None = Query(default=None),
        max_value: Decimal | None = Query(default=None),
        skip: int = Query(default=0, ge=0),
        limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_LIST_LIMIT),
) -> ProfitLogListResponse:
    """Paged search over live logs, newest first. All bounds are inclusive."""
    check_date_range(start_date, end_date)
    query = select(ProfitLog).where(ProfitLog.is_deleted.is_(False))

    if item_id is not None:
        query = query.where(ProfitLog.item_id == item_id)
    if start_date is not None:
        query = query.where(ProfitLog.date >= start_date)
    if end_date is not None:
        query = query.where(ProfitLog.date <= end_date)
    if min_profit is not None:
        query = query.where(ProfitLog.profit >= min_profit)
    if max_profit is not None:
        query = query.where(ProfitLog.profit <= max_profit)
    if min_value is not None:
        query = query.where(ProfitLog.value >= min_value)
    if max_value is not None:
        query = query.where(ProfitLog.value <= max_value)

    query = query.order_by(ProfitLog.date.desc(), ProfitLog.id.desc())

    total = db.scalar(select(func.count()).select_from(query.subquery()))
    logs = db.scalars(query.offset(skip).limit(limit)).all()

    return ProfitLogListResponse(
        items=list(logs),
        pagination=PaginationMeta.create(total=total, skip=skip, limit=limit),
    )


@router.get(
    "/summary",
    response_model=ProfitLogSummaryResponse,
    summary="Profit totals grouped by date and by item",
)
def get_summary(
        db: Session = Depends(get_db),
        service: ProfitLogService = Depends(get_profit_log_service),
        start_date: date | None = Query(default=None),
        end_date: date | None = Query(default=None),
        item_ids: str | None = Query(default=None, description="Comma separated item ids"),
) -> ProfitLogSummaryResponse:
    check_date_range(start_date, end_date)
    summary = service.get_summary(db, start_date, end_date, parse_item_ids(item_ids))

    return ProfitLogSummaryResponse(
        total_logs=summary.total_logs,
        total_profit=summary.total_profit,
        total_value=summary.total_value,
        avg_profit=summary.avg_profit,
        profit_by_date=[ProfitBucket.model_validate(b, from_attributes=True) for b in summary.profit_by_date],
        item_stats=[ProfitBucket.model_validate(b, from_attributes=True) for b in summary.item_stats],
    )


@router.get(
    "/trend",
    response_model=ProfitLogTrendResponse,
    summary="Profit trend by period",
)
def get_trend(
        db: Session = Depends(get_db),
        service: ProfitLogService = Depends(get_profit_log_service),
        group_by: str = Query(default="day", description="day, week (Sunday start) or month"),
        start_date: date | None = Query(default=None),
        end_date: date | None = Query(default=None),
        item_ids: str | None = Query(default=None, description="Comma separated item ids"),
) -> ProfitLogTrendResponse:
    """
    Sum profit and value per period. An unknown **group_by** returns 400.
    """
    check_date_range(start_date, end_date)
    buckets = service.get_trend(db, group_by, start_date, end_date, parse_item_ids(item_ids))

    return ProfitLogTrendResponse(
        group_by=group_by,
        trend=[ProfitBucket.model_validate(b, from_attributes=True) for b in buckets],
    )


@router.get(
    "/item/{item_id}",
    response_model=list[ProfitLogResponse],
    summary="Profit logs of an item",
)
def list_item_logs(
        item_id: int,
        db: Session = Depends(get_db),
) -> list[ProfitLog]:
    """Live logs of one item, newest first."""
    query = (
        select(ProfitLog)
        .where(ProfitLog.item_id == item_id, ProfitLog.is_deleted.is_(False))
        .order_by(ProfitLog.date.desc())
    )
    return list(db.scalars(query).all())


@router.get(
    "/item/{item_id}/stats",
    response_model=ProfitLogItemStatsResponse,
    summary="Profit statistics of an item",
)
def get_item_stats(
        item_id: int,
        db: Session = Depends(get_db),
        service: ProfitLogService = Depends(get_profit_log_service),
) -> ProfitLogItemStatsResponse:
    """Totals, extremes and the date-ordered trend; zeros when the item has no logs."""
    stats = service.get_item_stats(db, item_id)

    return ProfitLogItemStatsResponse(
        item_id=stats.item_id,
        total_logs=stats.total_logs,
        total_profit=stats.total_profit,
        avg_profit=stats.avg_profit,
        max_profit=stats.max_profit,
        min_profit=stats.min_profit,
        latest_value=stats.latest_value,
        profit_trend=[
            ProfitTrendPoint(date=p.date, profit=p.profit, value=p.value) for p in stats.profit_trend
        ],
    )


@router.get(
    "/{log_id}",
    response_model=ProfitLogResponse,
    summary="Get a profit log by ID",
)
def get_log(
        log_id: int,
        db: Session = Depends(get_db),
) -> ProfitLog:
    return get_log_or_404(db, log_id)


# =============================================================================
# WRITE ENDPOINTS
# =============================================================================

@router.post(
    "/",
    response_model=ProfitLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a profit snapshot",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_log(
        request: Request,  # Required for rate limiting
        data: ProfitLogCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> ProfitLog:
    """Raises **409** if the item already has a log on that date."""
    get_owned_item(db, data.item_id, current_user)

    log = store_log(db, data)
    db.commit()
    db.refresh(log)

    return log


@router.post(
    "/batch",
    response_model=ProfitLogBatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record several profit snapshots",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_logs_batch(
        request: Request,  # Required for rate limiting
        data: ProfitLogBatchCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> ProfitLogBatchResponse:
    """
    All-or-nothing insert. Duplicate (item, date) pairs, within the batch
    or against stored logs, return **409** and nothing is written.
    """
    for item_id in dict.fromkeys(log.item_id for log in data.logs):
        get_owned_item(db, item_id, current_user)

    seen: set[tuple[int, date]] = set()
    for log in data.logs:
        key = (log.item_id, log.date)
        if key in seen:
            raise ProfitLogExistsError(log.item_id, log.date)
        seen.add(key)

    try:
        logs = [store_log(db, log) for log in data.logs]
    except ProfitLogExistsError:
        db.rollback()
        raise
    db.commit()
    for log in logs:
        db.refresh(log)

    return ProfitLogBatchResponse(logs=[ProfitLogResponse.model_validate(log) for log in logs])


@router.patch(
    "/{log_id}",
    response_model=ProfitLogResponse,
    summary="Correct a profit snapshot",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_log(
        request: Request,  # Required for rate limiting
        log_id: int,
        log_update: ProfitLogUpdate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> ProfitLog:
    db_log = get_log_or_404(db, log_id)
    get_owned_item(db, db_log.item_id, current_user)

    for field, value in log_update.model_dump(exclude_unset=True).items():
        setattr(db_log, field, value)

    db.commit()
    db.refresh(db_log)

    return db_log


@router.delete(
    "/{log_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a profit snapshot",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_log(
        request: Request,  # Required for rate limiting
        log_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Session = Depends(get_db),
) -> None:
    db_log = get_log_or_404(db, log_id)
    get_owned_item(db, db_log.item_id, current_user)

    db_log.is_deleted = True
    db.commit()

    return None
