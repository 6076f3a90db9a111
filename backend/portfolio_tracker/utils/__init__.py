# backend/portfolio_tracker/utils/__init__.py
"""
Cross-cutting helpers for the portfolio tracker.

- logging: root logger configuration with correlation IDs
- context: per-request correlation ID storage
- date_utils: month labels, week buckets and ISO date parsing
- sql: LIKE pattern escaping for search endpoints
"""

from portfolio_tracker.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from portfolio_tracker.utils.logging import setup_logging
from portfolio_tracker.utils.sql import escape_like_pattern, contains_pattern

__all__ = [
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "escape_like_pattern",
    "contains_pattern",
]
