# backend/portfolio_tracker/services/valuation/service.py
"""
Valuation Service - orchestrator between the database and the calculators.

- get_valuation(): holdings and totals for one portfolio
- get_net_worth(): net worth series for every portfolio of a user
- get_top_movers(): best performing stocks and bonds
- get_monthly_profit(): month-over-month profit per asset type for a user
- get_summary(): latest / previous day / previous month-end net worth

Design Principles:
- Fetch a snapshot, convert rows to plain dataclasses, delegate to the
  calculators; no arithmetic lives here
- Soft-deleted rows never reach a calculator
- No HTTP knowledge: raises domain exceptions, not HTTPException

Usage:
    service = ValuationService()
    summary = service.get_valuation(db, portfolio_id=1)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from portfolio_tracker.models import (
    Asset,
    AssetType,
    Portfolio,
    PortfolioItem,
    ProfitLog,
    User,
)
from portfolio_tracker.services.exceptions import (
    PortfolioNotFoundError,
    UserNotFoundError,
)
from portfolio_tracker.services.valuation.calculators import HoldingsCalculator
from portfolio_tracker.services.valuation.ranking import TopMoversCalculator
from portfolio_tracker.services.valuation.timeseries import (
    MonthlyProfitCalculator,
    NetWorthCalculator,
    NetWorthSummaryCalculator,
)
from portfolio_tracker.services.valuation.types import (
    AssetQuote,
    LedgerEntry,
    MonthlyProfit,
    NetWorthPoint,
    NetWorthSummary,
    PortfolioLedger,
    ProfitObservation,
    TopMovers,
    ValuationSummary,
)
from portfolio_tracker.utils.date_utils import parse_iso_date

logger = logging.getLogger(__name__)


# =============================================================================
# ROW CONVERSION
# =============================================================================

def to_ledger_entry(item: PortfolioItem) -> LedgerEntry:
    return LedgerEntry(
        asset_code=item.asset_code,
        side=item.type,
        quantity=Decimal(str(item.quantity)),
        amount=Decimal(str(item.amount)),
        trade_date=item.purchase_date,
        asset_type=item.asset_type,
    )


def to_asset_quote(asset: Asset) -> AssetQuote:
    """
    Convert an Asset row into an AssetQuote.

    JSON columns hold plain numbers and ISO strings; prices go through
    str() so binary float noise does not leak into Decimal arithmetic.
    """
    return AssetQuote(
        asset_code=asset.asset_code,
        asset_type=asset.asset_type,
        price=Decimal(str(asset.price)),
        name=asset.name,
        currency=asset.currency,
        history_dates=tuple(parse_iso_date(d) for d in asset.history_dates or ()),
        history_prices=tuple(Decimal(str(p)) for p in asset.history_prices or ()),
    )


class ValuationService:
    """
    Entry point for every valuation and statistics computation.

    Calculators are stateless, so one instance is shared across requests
    (see dependencies.get_valuation_service).
    """

    def __init__(self) -> None:
        self._holdings_calc = HoldingsCalculator()
        self._net_worth_calc = NetWorthCalculator()
        self._monthly_calc = MonthlyProfitCalculator()
        self._summary_calc = NetWorthSummaryCalculator()
        self._ranking_calc = TopMoversCalculator()

        logger.info("ValuationService initialized")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_valuation(self, db: Session, portfolio_id: int) -> ValuationSummary:
        """
        Value one portfolio against current asset prices.

        Raises:
            PortfolioNotFoundError: Portfolio missing or soft-deleted
        """
        self._get_portfolio(db, portfolio_id)

        items = self._fetch_items(db, [portfolio_id])
        entries = [to_ledger_entry(item) for item in items]
        prices = {
            code: quote.price
            for code, quote in self._fetch_quotes(db, {e.asset_code for e in entries}).items()
        }

        summary = self._holdings_calc.calculate(entries, prices)
        logger.info(
            f"Portfolio {portfolio_id} valued: {len(summary.holdings)} holdings, "
            f"total_value={summary.total_value}"
        )
        return summary

    def get_net_worth(self, db: Session, user_id: int) -> dict[str, list[NetWorthPoint]]:
        """Net worth series for each portfolio of a user, keyed by portfolio name."""
        self._get_user(db, user_id)
        portfolios = self._fetch_user_portfolios(db, user_id)
        if not portfolios:
            return {}

        items = self._fetch_items(db, [p.id for p in portfolios])
        entries_by_portfolio: dict[int, list[LedgerEntry]] = defaultdict(list)
        for item in items:
            entries_by_portfolio[item.portfolio_id].append(to_ledger_entry(item))

        ledgers = [
            PortfolioLedger(
                portfolio_id=p.id,
                name=p.name,
                entries=tuple(entries_by_portfolio[p.id]),
            )
            for p in portfolios
        ]
        quotes = self._fetch_quotes(db, {item.asset_code for item in items})

        return self._net_worth_calc.calculate(ledgers, quotes)

    def get_top_movers(self, db: Session, limit: int) -> TopMovers:
        assets = db.scalars(
            select(Asset).where(Asset.is_deleted.is_(False)).order_by(Asset.id)
        ).all()
        return self._ranking_calc.calculate((to_asset_quote(a) for a in assets), limit)

    def get_monthly_profit(
            self,
            db: Session,
            user_id: int,
            months: int,
            today: date | None = None,
    ) -> dict[AssetType, list[MonthlyProfit]]:
        self._get_user(db, user_id)
        observations = self._fetch_observations(db, user_id)
        return self._monthly_calc.calculate(observations, months, today=today)

    def get_summary(self, db: Session, user_id: int) -> NetWorthSummary:
        self._get_user(db, user_id)
        portfolio_ids = [p.id for p in self._fetch_user_portfolios(db, user_id)]
        entries = [to_ledger_entry(item) for item in self._fetch_items(db, portfolio_ids)]
        observations = self._fetch_observations(db, user_id)
        return self._summary_calc.calculate(observations, entries)

    # =========================================================================
    # DATA FETCHING
    # =========================================================================

    @staticmethod
    def _get_portfolio(db: Session, portfolio_id: int) -> Portfolio:
        portfolio = db.get(Portfolio, portfolio_id)
        if portfolio is None or portfolio.is_deleted:
            raise PortfolioNotFoundError(portfolio_id)
        return portfolio

    @staticmethod
    def _get_user(db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    @staticmethod
    def _fetch_user_portfolios(db: Session, user_id: int) -> list[Portfolio]:
        query = (
            select(Portfolio)
            .where(Portfolio.user_id == user_id, Portfolio.is_deleted.is_(False))
            .order_by(Portfolio.id)
        )
        return list(db.scalars(query).all())

    @staticmethod
    def _fetch_items(db: Session, portfolio_ids: list[int]) -> list[PortfolioItem]:
        """
        Live ledger entries of the given portfolios in insertion order.

        Insertion order (id) is the processing order; entries are
        deliberately not sorted by trade date.
        """
        if not portfolio_ids:
            return []
        query = (
            select(PortfolioItem)
            .where(
                PortfolioItem.portfolio_id.in_(portfolio_ids),
                PortfolioItem.is_deleted.is_(False),
            )
            .order_by(PortfolioItem.id)
        )
        return list(db.scalars(query).all())

    @staticmethod
    def _fetch_quotes(db: Session, asset_codes: set[str]) -> dict[str, AssetQuote]:
        if not asset_codes:
            return {}
        query = select(Asset).where(
            Asset.asset_code.in_(asset_codes),
            Asset.is_deleted.is_(False),
        )
        return {asset.asset_code: to_asset_quote(asset) for asset in db.scalars(query).all()}

    @staticmethod
    def _fetch_observations(db: Session, user_id: int) -> list[ProfitObservation]:
        """
        Profit log values of a user's live items, summed per (asset type, date).
        """
        query = (
            select(PortfolioItem.asset_type, ProfitLog.date, ProfitLog.value)
            .join(PortfolioItem, ProfitLog.item_id == PortfolioItem.id)
            .join(Portfolio, PortfolioItem.portfolio_id == Portfolio.id)
            .where(
                Portfolio.user_id == user_id,
                Portfolio.is_deleted.is_(False),
                PortfolioItem.is_deleted.is_(False),
                ProfitLog.is_deleted.is_(False),
            )
            .order_by(ProfitLog.date, ProfitLog.id)
        )

        totals: dict[tuple[AssetType, date], Decimal] = {}
        for asset_type, log_date, value in db.execute(query):
            key = (asset_type, log_date)
            totals[key] = totals.get(key, Decimal("0")) + Decimal(str(value))

        return [
            ProfitObservation(date=log_date, value=value, asset_type=asset_type)
            for (asset_type, log_date), value in totals.items()
        ]
