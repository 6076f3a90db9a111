# backend/portfolio_tracker/utils/sql.py
"""
Helpers for building LIKE / ILIKE search filters.

Search endpoints pass user input straight into ILIKE clauses, so the
wildcard characters must be escaped first:

    stmt = stmt.where(Asset.name.ilike(contains_pattern(term), escape="\\\\"))
"""

LIKE_ESCAPE_CHAR = "\\"


def escape_like_pattern(value: str) -> str:
    """
    Escape %, _ and the escape character itself so they match literally.

    >>> escape_like_pattern("50%_off")
    '50\\\\%\\\\_off'
    """
    # Backslash first, otherwise the escapes added below get doubled
    return (
        value
        .replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def contains_pattern(value: str) -> str:
    """Wrap an escaped search term for substring matching."""
    return f"%{escape_like_pattern(value)}%"
