# backend/portfolio_tracker/services/market_simulation.py
"""
Simulated market feed.

Produces synthetic quotes for the dashboard widgets:
- indices(): intraday random walks of four major indices
- rise_fall(): histogram of how many stocks moved into each % band
- stocks(): large-cap stock quotes
- assets(): stock and bond quotes (bonds move far less than stocks)

Model:
    sentiment ~ U[-1, 1), drawn once per call and shared by every quote
    index walk: p[i] = p[i-1] × (1 + N(drift + sentiment × 0.0003, volatility))
    quote move: change ~ N(sentiment × bias, volatility); price × (1 + change)

All randomness comes from one numpy Generator. Two simulators built with
the same seed produce the same sequence of responses.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import numpy as np

from portfolio_tracker.models import AssetType
from portfolio_tracker.services.constants import (
    BOND_VOLATILITY,
    MARKET_TREND_POINTS,
    STOCK_VOLATILITY,
)

logger = logging.getLogger(__name__)


# =============================================================================
# REFERENCE DATA
# =============================================================================

@dataclass(frozen=True)
class MarketIndex:
    name: str
    start: float
    drift: float
    volatility: float


@dataclass(frozen=True)
class Instrument:
    symbol: str
    name: str
    price: float
    type: AssetType = AssetType.STOCK


INDICES: tuple[MarketIndex, ...] = (
    MarketIndex("S&P 500", 4185.47, 0.0005, 0.002),
    MarketIndex("NASDAQ", 12965.34, 0.0006, 0.0025),
    MarketIndex("DOW", 33745.69, 0.0004, 0.0015),
    MarketIndex("VIX", 18.45, -0.0002, 0.005),
)

LARGE_CAP_STOCKS: tuple[Instrument, ...] = (
    Instrument("AAPL", "Apple Inc.", 152.34),
    Instrument("MSFT", "Microsoft Corp.", 318.56),
    Instrument("GOOGL", "Alphabet Inc.", 125.67),
    Instrument("TSLA", "Tesla Inc.", 652.78),
    Instrument("NVDA", "NVIDIA Corp.", 842.12),
    Instrument("AMZN", "Amazon.com Inc.", 132.77),
    Instrument("META", "Meta Platforms Inc.", 298.12),
    Instrument("BABA", "Alibaba Group Holding Ltd.", 89.45),
)

MARKET_ASSETS: tuple[Instrument, ...] = (
    Instrument("AAPL", "Apple Inc.", 152.34),
    Instrument("MSFT", "Microsoft Corp.", 318.56),
    Instrument("GOOGL", "Alphabet Inc.", 125.67),
    Instrument("TSLA", "Tesla Inc.", 652.78),
    Instrument("NVDA", "NVIDIA Corp.", 842.12),
    Instrument("Bond A", "US Treasury 10Y", 98.50, AssetType.BOND),
    Instrument("Bond B", "Corporate Bond B", 102.20, AssetType.BOND),
    Instrument("Bond C", "Municipal Bond C", 101.75, AssetType.BOND),
    Instrument("Bond D", "Corporate Bond D", 99.80, AssetType.BOND),
    Instrument("Bond E", "Bond ETF E", 100.40, AssetType.BOND),
    Instrument("META", "Meta Platforms Inc.", 340.12),
    Instrument("ORCL", "Oracle Corp.", 120.45),
)

# (label, low, high): counts are drawn uniformly from [low, high)
RISE_FALL_BANDS: tuple[tuple[str, int, int], ...] = (
    ("Lim Down", 5, 15),
    ("-8%", 10, 30),
    ("-6%", 20, 60),
    ("-4%", 50, 170),
    ("-2%", 400, 1200),
    ("0", 800, 2300),
    ("2%", 400, 1200),
    ("4%", 50, 170),
    ("6%", 20, 60),
    ("8%", 10, 30),
    ("Lim Up", 5, 15),
)

INDEX_SENTIMENT_WEIGHT = 0.0003
STOCK_SENTIMENT_BIAS = 0.002
ASSET_SENTIMENT_BIAS = 0.001


# =============================================================================
# OUTPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class IndexQuote:
    name: str
    value: float
    change: float
    trend: list[float]


@dataclass(frozen=True)
class RiseFallBucket:
    range: str
    count: int
    sort_order: int


@dataclass(frozen=True)
class InstrumentQuote:
    symbol: str
    name: str
    type: AssetType
    price: float
    change: float
    change_amount: float


# =============================================================================
# SIMULATOR
# =============================================================================

class MarketSimulator:
    """
    Random-walk market simulator.

    Shared as a singleton (see dependencies.get_market_simulator). numpy
    Generators are not thread-safe, so every draw happens under a lock.
    """

    def __init__(self, seed: int | None = None, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._lock = threading.Lock()
        logger.info(f"MarketSimulator initialized (seed={seed})")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def indices(self) -> list[IndexQuote]:
        with self._lock:
            sentiment = self._sentiment()
            quotes = []
            for index in INDICES:
                trend = self.generate_trend(
                    index.start,
                    points=MARKET_TREND_POINTS,
                    drift=index.drift,
                    volatility=index.volatility,
                    sentiment=sentiment,
                )
                last, previous = trend[-1], trend[-2]
                quotes.append(IndexQuote(
                    name=index.name,
                    value=round(last, 2),
                    change=round((last - previous) / previous * 100, 2),
                    trend=trend,
                ))
        return quotes

    def rise_fall(self) -> list[RiseFallBucket]:
        with self._lock:
            return [
                RiseFallBucket(range=label, count=int(self._rng.integers(low, high)), sort_order=i)
                for i, (label, low, high) in enumerate(RISE_FALL_BANDS)
            ]

    def stocks(self) -> list[InstrumentQuote]:
        with self._lock:
            sentiment = self._sentiment()
            return [
                self._move(instrument, sentiment * STOCK_SENTIMENT_BIAS, STOCK_VOLATILITY)
                for instrument in LARGE_CAP_STOCKS
            ]

    def assets(self) -> list[InstrumentQuote]:
        with self._lock:
            sentiment = self._sentiment()
            return [
                self._move(
                    instrument,
                    sentiment * ASSET_SENTIMENT_BIAS,
                    STOCK_VOLATILITY if instrument.type == AssetType.STOCK else BOND_VOLATILITY,
                )
                for instrument in MARKET_ASSETS
            ]

    # =========================================================================
    # RANDOM WALK
    # =========================================================================

    def generate_trend(
            self,
            start: float,
            points: int = MARKET_TREND_POINTS,
            drift: float = 0.0005,
            volatility: float = 0.002,
            sentiment: float = 0.0,
    ) -> list[float]:
        """
        Random walk of `points` prices starting at `start`, rounded to cents.

        Each step compounds on the rounded previous price.
        """
        returns = self._rng.normal(drift + sentiment * INDEX_SENTIMENT_WEIGHT, volatility, points - 1)
        prices = [start]
        for daily_return in returns:
            prices.append(round(prices[-1] * (1 + float(daily_return)), 2))
        return prices

    def _sentiment(self) -> float:
        return float(self._rng.uniform(-1.0, 1.0))

    def _move(self, instrument: Instrument, mean: float, volatility: float) -> InstrumentQuote:
        change = float(self._rng.normal(mean, volatility))
        change_amount = instrument.price * change
        return InstrumentQuote(
            symbol=instrument.symbol,
            name=instrument.name,
            type=instrument.type,
            price=round(instrument.price + change_amount, 2),
            change=round(change * 100, 2),
            change_amount=round(change_amount, 2),
        )
