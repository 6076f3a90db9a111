# backend/portfolio_tracker/services/constants.py
"""
Business and operational constants shared across the services.

Usage:
    from portfolio_tracker.services.constants import (
        ZERO,
        GROWTH_PRECISION,
        DEFAULT_TOP_MOVERS_LIMIT,
    )
"""

from decimal import Decimal


# =============================================================================
# DECIMAL PRECISION
# =============================================================================

# Currency amounts: 2 decimal places
# Used for: API display of values, profit-log aggregates
CURRENCY_PRECISION: Decimal = Decimal("0.01")

# Asset growth ratios: 4 decimal places (0.1234 = +12.34%)
GROWTH_PRECISION: Decimal = Decimal("0.0001")

# Display percentage: 2 decimal places (e.g. 12.34%)
DISPLAY_PERCENTAGE_PRECISION: Decimal = Decimal("0.01")

ZERO: Decimal = Decimal("0")
HUNDRED: Decimal = Decimal("100")


# =============================================================================
# STATISTICS DEFAULTS
# =============================================================================

# Number of top stocks/bonds returned by the top movers ranking
DEFAULT_TOP_MOVERS_LIMIT: int = 5
MAX_TOP_MOVERS_LIMIT: int = 100

# Trailing months covered by the monthly profit breakdown
DEFAULT_PROFIT_MONTHS: int = 6
MAX_PROFIT_MONTHS: int = 120


# =============================================================================
# MARKET SIMULATION
# =============================================================================

# Points per simulated index trend line
MARKET_TREND_POINTS: int = 24

# Daily volatility of simulated assets by type
STOCK_VOLATILITY: float = 0.015
BOND_VOLATILITY: float = 0.002


# =============================================================================
# RATE LIMITING
# =============================================================================
# slowapi/limits syntax: "100/minute", "10/hour", ...

# Read endpoints (GET)
RATE_LIMIT_DEFAULT: str = "100/minute"

# Write endpoints (POST, PATCH, DELETE)
RATE_LIMIT_WRITE: str = "30/minute"

# Health checks; monitoring tools poll frequently
RATE_LIMIT_HEALTH: str = "300/minute"

# Statistics and valuation; these aggregate whole ledgers per request
RATE_LIMIT_STATISTICS: str = "30/minute"

# Brute-force protection on credentials
RATE_LIMIT_AUTH_LOGIN: str = "10/minute"

# Mass account creation protection
RATE_LIMIT_AUTH_REGISTER: str = "5/minute"


# =============================================================================
# RESOURCE LIMITS
# =============================================================================

# Maximum entries accepted by a single batch request
MAX_BATCH_SIZE: int = 500

# Upper bound for the pagination limit parameter
MAX_LIST_LIMIT: int = 1000

DEFAULT_PAGE_SIZE: int = 10
