# backend/portfolio_tracker/services/profit_logs.py
"""
Profit log aggregation.

- ProfitLogAggregator: pure statistics over profit log records
    - item_stats(): totals, extremes and trend of one portfolio item
    - summary(): totals plus per-date and per-item groups
    - trend(): profit and value bucketed by day, week or month
- ProfitLogService: fetches live logs with filters and delegates to the
  aggregator

Buckets are plain ordered dicts built inside each call, so concurrent
requests never share accumulator state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from portfolio_tracker.models import ProfitLog
from portfolio_tracker.services.constants import CURRENCY_PRECISION, ZERO
from portfolio_tracker.services.exceptions import InvalidGroupingError
from portfolio_tracker.utils.date_utils import month_label, week_start

logger = logging.getLogger(__name__)


# =============================================================================
# TYPES
# =============================================================================

@dataclass(frozen=True)
class ProfitLogRecord:
    item_id: int
    date: date
    value: Decimal
    profit: Decimal


@dataclass(frozen=True)
class TrendPoint:
    date: date
    profit: Decimal
    value: Decimal


@dataclass(frozen=True)
class ItemProfitStats:
    item_id: int
    total_logs: int
    total_profit: Decimal
    avg_profit: Decimal
    max_profit: Decimal
    min_profit: Decimal
    latest_value: Decimal
    profit_trend: tuple[TrendPoint, ...] = ()


@dataclass
class ProfitBucket:
    key: str
    profit: Decimal = ZERO
    value: Decimal = ZERO
    count: int = 0

    def add(self, record: ProfitLogRecord) -> None:
        self.profit += record.profit
        self.value += record.value
        self.count += 1


@dataclass(frozen=True)
class ProfitSummary:
    total_logs: int
    total_profit: Decimal
    total_value: Decimal
    avg_profit: Decimal
    profit_by_date: tuple[ProfitBucket, ...] = field(default_factory=tuple)
    item_stats: tuple[ProfitBucket, ...] = field(default_factory=tuple)


def to_profit_record(log: ProfitLog) -> ProfitLogRecord:
    return ProfitLogRecord(
        item_id=log.item_id,
        date=log.date,
        value=Decimal(str(log.value)),
        profit=Decimal(str(log.profit)),
    )


def _average(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return (total / count).quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


# =============================================================================
# AGGREGATOR
# =============================================================================

class ProfitLogAggregator:
    """
    Stateless statistics over profit log records.

    Records are expected in ascending date order (ties in insertion order);
    the "latest" value is that of the last record.
    """

    GROUPINGS: dict[str, Callable[[date], str]] = {
        "day": lambda d: d.isoformat(),
        "week": lambda d: week_start(d).isoformat(),
        "month": month_label,
    }

    def item_stats(self, item_id: int, records: Sequence[ProfitLogRecord]) -> ItemProfitStats:
        """Profit statistics of one item; every figure is 0 without records."""
        if not records:
            return ItemProfitStats(
                item_id=item_id,
                total_logs=0,
                total_profit=ZERO,
                avg_profit=ZERO,
                max_profit=ZERO,
                min_profit=ZERO,
                latest_value=ZERO,
            )

        profits = [r.profit for r in records]
        total = sum(profits, ZERO)

        return ItemProfitStats(
            item_id=item_id,
            total_logs=len(records),
            total_profit=total,
            avg_profit=_average(total, len(records)),
            max_profit=max(profits),
            min_profit=min(profits),
            latest_value=records[-1].value,
            profit_trend=tuple(
                TrendPoint(date=r.date, profit=r.profit, value=r.value) for r in records
            ),
        )

    def summary(self, records: Sequence[ProfitLogRecord]) -> ProfitSummary:
        """
        Totals over all records, grouped by date and by item.

        Groups keep first-seen order, which is chronological for sorted input.
        """
        by_date: dict[str, ProfitBucket] = {}
        by_item: dict[str, ProfitBucket] = {}
        total_profit = ZERO
        total_value = ZERO

        for record in records:
            total_profit += record.profit
            total_value += record.value

            date_key = record.date.isoformat()
            by_date.setdefault(date_key, ProfitBucket(key=date_key)).add(record)

            item_key = str(record.item_id)
            by_item.setdefault(item_key, ProfitBucket(key=item_key)).add(record)

        return ProfitSummary(
            total_logs=len(records),
            total_profit=total_profit,
            total_value=total_value,
            avg_profit=_average(total_profit, len(records)),
            profit_by_date=tuple(by_date.values()),
            item_stats=tuple(by_item.values()),
        )

    def trend(self, records: Iterable[ProfitLogRecord], group_by: str) -> list[ProfitBucket]:
        """
        Bucket records by period.

        Args:
            records: Records in any order
            group_by: "day" (ISO date), "week" (Sunday start, ISO date) or
                "month" ("YYYY-MM")

        Returns:
            Buckets sorted by period key

        Raises:
            InvalidGroupingError: Unknown group_by
        """
        key_of = self.GROUPINGS.get(group_by)
        if key_of is None:
            raise InvalidGroupingError(group_by)

        buckets: dict[str, ProfitBucket] = {}
        for record in records:
            key = key_of(record.date)
            buckets.setdefault(key, ProfitBucket(key=key)).add(record)

        return [buckets[key] for key in sorted(buckets)]


# =============================================================================
# SERVICE
# =============================================================================

class ProfitLogService:
    """Database-facing wrapper: fetches live logs and aggregates them."""

    def __init__(self, aggregator: ProfitLogAggregator | None = None) -> None:
        self._aggregator = aggregator or ProfitLogAggregator()

    def get_item_stats(self, db: Session, item_id: int) -> ItemProfitStats:
        records = self.fetch_records(db, item_ids=[item_id])
        return self._aggregator.item_stats(item_id, records)

    def get_summary(
            self,
            db: Session,
            start_date: date | None = None,
            end_date: date | None = None,
            item_ids: list[int] | None = None,
    ) -> ProfitSummary:
        records = self.fetch_records(db, start_date, end_date, item_ids)
        return self._aggregator.summary(records)

    def get_trend(
            self,
            db: Session,
            group_by: str,
            start_date: date | None = None,
            end_date: date | None = None,
            item_ids: list[int] | None = None,
    ) -> list[ProfitBucket]:
        # Reject a bad grouping before touching the database
        if group_by not in ProfitLogAggregator.GROUPINGS:
            raise InvalidGroupingError(group_by)
        records = self.fetch_records(db, start_date, end_date, item_ids)
        return self._aggregator.trend(records, group_by)

    @staticmethod
    def fetch_records(
            db: Session,
            start_date: date | None = None,
            end_date: date | None = None,
            item_ids: list[int] | None = None,
    ) -> list[ProfitLogRecord]:
        """Live logs matching the filters, oldest first."""
        query = select(ProfitLog).where(ProfitLog.is_deleted.is_(False))
        if start_date is not None:
            query = query.where(ProfitLog.date >= start_date)
        if end_date is not None:
            query = query.where(ProfitLog.date <= end_date)
        if item_ids:
            query = query.where(ProfitLog.item_id.in_(item_ids))

        rows = db.scalars(query.order_by(ProfitLog.date, ProfitLog.id)).all()
        logger.debug(f"Fetched {len(rows)} profit logs for aggregation")
        return [to_profit_record(row) for row in rows]
