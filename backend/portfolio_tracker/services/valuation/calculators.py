# backend/portfolio_tracker/services/valuation/calculators.py
"""
Point-in-time valuation calculators.

- HoldingsCalculator: replays a ledger into holdings and portfolio totals

Design Principles:
- Stateless (no instance state); the same inputs always give the same output
- Receives all inputs explicitly; no database access
- Decimal for ALL financial calculations
- Never raises on degenerate numbers: zero or negative quantities turn into
  Infinity/NaN instead of exceptions (see lenient_decimal_context)

Usage:
    summary = HoldingsCalculator().calculate(
        entries=[LedgerEntry("AAPL", TradeType.BUY, Decimal("10"), Decimal("100"))],
        price_by_asset_code={"AAPL": Decimal("12")},
    )
"""

from __future__ import annotations

import decimal
import logging
from collections.abc import Iterable, Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass
from decimal import Decimal

from portfolio_tracker.models import AssetType, TradeType
from portfolio_tracker.services.constants import ZERO, HUNDRED
from portfolio_tracker.services.valuation.types import (
    Holding,
    HoldingState,
    LedgerEntry,
    ValuationSummary,
)

logger = logging.getLogger(__name__)


def lenient_decimal_context() -> AbstractContextManager[decimal.Context]:
    """
    Decimal context in which x/0 and overflowing results give ±Infinity
    and 0/0 gives NaN.

    The calculators leave input validation to the request layer; bad
    quantities must propagate arithmetically rather than abort a request.
    NaN ordering comparisons evaluate to False under this context.
    """
    ctx = decimal.getcontext().copy()
    ctx.traps[decimal.DivisionByZero] = False
    ctx.traps[decimal.InvalidOperation] = False
    ctx.traps[decimal.Overflow] = False
    return decimal.localcontext(ctx)


@dataclass
class _RunningPosition:
    """Mutable accumulator used while replaying one asset's entries."""

    asset_code: str
    asset_type: AssetType
    quantity: Decimal = ZERO
    cost: Decimal = ZERO
    realized: Decimal = ZERO


# =============================================================================
# HOLDINGS CALCULATOR
# =============================================================================

class HoldingsCalculator:
    """
    Replays buy/sell entries, in the order given, into per-asset holdings.

    BUY:  quantity += q; cost += amount
    SELL: avg = cost / quantity if quantity > 0, else the sell's own unit price
          realized += (unit price − avg) × q
          quantity −= q; cost −= avg × q

    The sell fallback keeps a sell without a long position from dividing by
    zero; its realized contribution is then exactly zero.

    Entries are not re-sorted by date. Assets missing from the price map are
    skipped entirely: no holding and no realized gain.
    """

    def calculate(
            self,
            entries: Iterable[LedgerEntry],
            price_by_asset_code: Mapping[str, Decimal],
    ) -> ValuationSummary:
        """
        Value a ledger against current prices.

        Args:
            entries: Ledger entries in processing order
            price_by_asset_code: Current price per asset code

        Returns:
            ValuationSummary with holdings in first-seen order
        """
        with lenient_decimal_context():
            positions, skipped = self._replay(entries, price_by_asset_code)

            holdings = tuple(
                self._classify(position, price_by_asset_code[code])
                for code, position in positions.items()
            )

            realized = sum((p.realized for p in positions.values()), ZERO)
            open_holdings = [h for h in holdings if h.is_open]
            unrealized = sum((h.unrealized_gain for h in open_holdings), ZERO)
            total_value = sum((h.market_value for h in open_holdings), ZERO)
            total_cost = sum((abs(h.cost) for h in open_holdings), ZERO)
            total_gain = realized + unrealized

            if total_cost == ZERO:
                total_gain_percent = ZERO
            else:
                total_gain_percent = total_gain / total_cost * HUNDRED

        logger.debug(
            f"Valued {len(holdings)} holdings ({len(open_holdings)} open), "
            f"skipped {len(skipped)} unpriced assets"
        )

        return ValuationSummary(
            holdings=holdings,
            realized_gain=realized,
            unrealized_gain=unrealized,
            total_value=total_value,
            total_cost=total_cost,
            total_gain=total_gain,
            total_gain_percent=total_gain_percent,
            skipped_asset_codes=tuple(skipped),
        )

    def _replay(
            self,
            entries: Iterable[LedgerEntry],
            price_by_asset_code: Mapping[str, Decimal],
    ) -> tuple[dict[str, _RunningPosition], list[str]]:
        positions: dict[str, _RunningPosition] = {}
        skipped: list[str] = []

        for entry in entries:
            if entry.asset_code not in price_by_asset_code:
                if entry.asset_code not in skipped:
                    logger.warning(f"Asset {entry.asset_code} has no price, skipping")
                    skipped.append(entry.asset_code)
                continue

            position = positions.get(entry.asset_code)
            if position is None:
                position = _RunningPosition(entry.asset_code, entry.asset_type)
                positions[entry.asset_code] = position

            self.apply_entry(position, entry)

        return positions, skipped

    @staticmethod
    def apply_entry(position: _RunningPosition, entry: LedgerEntry) -> None:
        """Apply one entry to a running position (mutates position)."""
        if entry.side == TradeType.BUY:
            position.quantity += entry.quantity
            position.cost += entry.amount
            return

        unit_price = entry.unit_price
        if position.quantity > ZERO:
            avg_cost = position.cost / position.quantity
        else:
            avg_cost = unit_price

        position.realized += (unit_price - avg_cost) * entry.quantity
        position.quantity -= entry.quantity
        position.cost -= avg_cost * entry.quantity

    @staticmethod
    def _classify(position: _RunningPosition, current_price: Decimal) -> Holding:
        quantity = position.quantity

        if quantity > ZERO:
            state = HoldingState.LONG
        elif quantity < ZERO:
            state = HoldingState.SHORT
        else:
            state = HoldingState.CLOSED

        if state == HoldingState.CLOSED:
            return Holding(
                asset_code=position.asset_code,
                asset_type=position.asset_type,
                state=state,
                quantity=ZERO,
                cost=ZERO,
                avg_cost=ZERO,
                current_price=current_price,
                market_value=ZERO,
                unrealized_gain=ZERO,
                realized_gain=position.realized,
            )

        avg_cost = position.cost / quantity
        if state == HoldingState.LONG:
            unrealized = (current_price - avg_cost) * quantity
        else:
            unrealized = (avg_cost - current_price) * abs(quantity)

        return Holding(
            asset_code=position.asset_code,
            asset_type=position.asset_type,
            state=state,
            quantity=quantity,
            cost=position.cost,
            avg_cost=avg_cost,
            current_price=current_price,
            market_value=quantity * current_price,
            unrealized_gain=unrealized,
            realized_gain=position.realized,
        )
