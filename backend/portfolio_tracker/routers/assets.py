# backend/portfolio_tracker/routers/assets.py
"""
Asset management endpoints.

Assets are shared across all users: reads are public, writes need the
admin role. Deleting an asset only flags it (is_deleted); flagged assets
disappear from every read and every valuation.

Price histories are stored as parallel JSON arrays: ISO date strings and
decimal strings, so no precision is lost to binary floats.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import require_admin
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_WRITE, limiter
from portfolio_tracker.models import Asset, AssetType, User
from portfolio_tracker.schemas.assets import (
    AssetBatchPriceUpdateRequest,
    AssetBatchPriceUpdateResponse,
    AssetCreate,
    AssetListResponse,
    AssetPriceUpdateResult,
    AssetResponse,
    AssetUpdate,
)
from portfolio_tracker.schemas.pagination import PaginationMeta
from portfolio_tracker.services.constants import DEFAULT_PAGE_SIZE, MAX_LIST_LIMIT
from portfolio_tracker.utils.sql import LIKE_ESCAPE_CHAR, contains_pattern

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/assets",
    tags=["Assets"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_asset_or_404(db: Session, asset_id: int) -> Asset:
    """
    Fetch a live asset by ID or raise 404.
    """
    asset = db.get(Asset, asset_id)

    if asset is None or asset.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Asset with id {asset_id} not found"
        )

    return asset


def asset_code_exists(db: Session, asset_code: str) -> bool:
    """
    Whether any asset row, flagged or not, already uses this code.

    Codes stay reserved after a soft delete (the column is unique).
    """
    query = select(Asset.id).where(Asset.asset_code == asset_code)
    return db.execute(query).first() is not None


def serialize_history(dates: list[date], prices: list[Decimal]) -> tuple[list[str], list[str]]:
    """Convert a validated history into its JSON column representation."""
    return [d.isoformat() for d in dates], [str(p) for p in prices]


def _paginate(db: Session, query, skip: int, limit: int) -> AssetListResponse:
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    assets = db.scalars(query.offset(skip).limit(limit)).all()
    return AssetListResponse(
        items=list(assets),
        pagination=PaginationMeta.create(total=total, skip=skip, limit=limit),
    )


# =============================================================================
# READ ENDPOINTS
# =============================================================================

@router.get(
    "/",
    response_model=AssetListResponse,
    summary="List assets",
)
def list_assets(
        db: Session = Depends(get_db),
        skip: int = Query(default=0, ge=0, description="Number of records to skip"),
        limit: int = Query(default=100, ge=1, le=MAX_LIST_LIMIT, description="Maximum records to return"),
) -> AssetListResponse:
    """All live assets in creation order."""
    query = select(Asset).where(Asset.is_deleted.is_(False)).order_by(Asset.id)
    return _paginate(db, query, skip, limit)


@router.get(
    "/search",
    response_model=AssetListResponse,
    summary="Search assets",
)
def search_assets(
        db: Session = Depends(get_db),
        asset_type: AssetType | None = Query(default=None, description="Filter by asset class"),
        currency: str | None = Query(default=None, max_length=3, description="Filter by currency"),
        name: str | None = Query(default=None, max_length=200, description="Substring of the name"),
        asset_code: str | None = Query(default=None, max_length=50, description="Substring of the code"),
        min_price: Decimal | None = Query(default=None, ge=0, description="Minimum current price"),
        max_price: Decimal | None = Query(default=None, ge=0, description="Maximum current price"),
        skip: int = Query(default=0, ge=0),
        limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_LIST_LIMIT),
) -> AssetListResponse:
    """
    Paged search over live assets.

    **name** and **asset_code** match case-insensitive substrings; the
    price bounds are inclusive.
    """
    query = select(Asset).where(Asset.is_deleted.is_(False))

    if asset_type is not None:
        query = query.where(Asset.asset_type == asset_type)

    if currency is not None:
        query = query.where(Asset.currency == currency.strip().upper())

    if name:
        query = query.where(Asset.name.ilike(contains_pattern(name), escape=LIKE_ESCAPE_CHAR))

    if asset_code:
        query = query.where(
            Asset.asset_code.ilike(contains_pattern(asset_code), escape=LIKE_ESCAPE_CHAR)
        )

    if min_price is not None:
        query = query.where(Asset.price >= min_price)

    if max_price is not None:
        query = query.where(Asset.price <= max_price)

    return _paginate(db, query.order_by(Asset.id), skip, limit)


@router.get(
    "/code/{asset_code}",
    response_model=AssetResponse,
    summary="Get an asset by code",
)
def get_asset_by_code(
        asset_code: str,
        db: Session = Depends(get_db),
) -> Asset:
    query = select(Asset).where(Asset.asset_code == asset_code, Asset.is_deleted.is_(False))
    asset = db.scalars(query).first()

    if asset is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Asset with code '{asset_code}' not found"
        )

    return asset


@router.get(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Get an asset by ID",
)
def get_asset(
        asset_id: int,
        db: Session = Depends(get_db),
) -> Asset:
    """
    Retrieve a single asset by its ID.

    Raises **404** if the asset does not exist or was deleted.
    """
    return get_asset_or_404(db, asset_id)


# =============================================================================
# WRITE ENDPOINTS (admin only)
# =============================================================================

@router.post(
    "/",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an asset",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_asset(
        request: Request,  # Required for rate limiting
        asset: AssetCreate,
        admin: Annotated[User, Depends(require_admin)],
        db: Session = Depends(get_db),
) -> Asset:
    """
    Register an asset with its current price and price history.

    Raises **409** if the asset code is already used.
    """
    if asset_code_exists(db, asset.asset_code):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Asset with code '{asset.asset_code}' already exists"
        )

    history_dates, history_prices = serialize_history(asset.history_dates, asset.history_prices)
    db_asset = Asset(
        **asset.model_dump(exclude={"history_dates", "history_prices"}),
        history_dates=history_dates,
        history_prices=history_prices,
    )

    db.add(db_asset)
    db.commit()
    db.refresh(db_asset)

    return db_asset


@router.patch(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Update an asset",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_asset(
        request: Request,  # Required for rate limiting
        asset_id: int,
        asset_update: AssetUpdate,
        admin: Annotated[User, Depends(require_admin)],
        db: Session = Depends(get_db),
) -> Asset:
    """
    Partial update. The price history, when sent, replaces the stored one.
    """
    db_asset = get_asset_or_404(db, asset_id)

    update_data = asset_update.model_dump(exclude_unset=True, exclude={"history_dates", "history_prices"})
    for field, value in update_data.items():
        setattr(db_asset, field, value)

    if asset_update.history_dates is not None:
        db_asset.history_dates, db_asset.history_prices = serialize_history(
            asset_update.history_dates, asset_update.history_prices
        )

    db.commit()
    db.refresh(db_asset)

    return db_asset


@router.delete(
    "/{asset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an asset",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_asset(
        request: Request,  # Required for rate limiting
        asset_id: int,
        admin: Annotated[User, Depends(require_admin)],
        db: Session = Depends(get_db),
) -> None:
    """
    Soft delete: the row is kept but excluded from reads and valuations.
    """
    db_asset = get_asset_or_404(db, asset_id)

    db_asset.is_deleted = True
    db.commit()

    return None


@router.post(
    "/batch-update-prices",
    response_model=AssetBatchPriceUpdateResponse,
    summary="Update prices of several assets",
)
@limiter.limit(RATE_LIMIT_WRITE)
def batch_update_prices(
        request: Request,  # Required for rate limiting
        data: AssetBatchPriceUpdateRequest,
        admin: Annotated[User, Depends(require_admin)],
        db: Session = Depends(get_db),
) -> AssetBatchPriceUpdateResponse:
    """
    Set the current price (and optionally the history) of assets by code.

    Unknown or deleted codes are reported with `updated: false`; the other
    updates still apply.
    """
    codes = [update.asset_code for update in data.updates]
    assets_by_code = {
        asset.asset_code: asset
        for asset in db.scalars(
            select(Asset).where(Asset.asset_code.in_(codes), Asset.is_deleted.is_(False))
        ).all()
    }

    results = []
    for update in data.updates:
        asset = assets_by_code.get(update.asset_code)
        if asset is None:
            results.append(AssetPriceUpdateResult(asset_code=update.asset_code, updated=False))
            continue

        asset.price = update.price
        if update.history_dates is not None:
            asset.history_dates, asset.history_prices = serialize_history(
                update.history_dates, update.history_prices
            )
        results.append(AssetPriceUpdateResult(asset_code=update.asset_code, updated=True))

    db.commit()

    return AssetBatchPriceUpdateResponse(results=results)
