# backend/portfolio_tracker/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

- Asset code validation and normalization
- Currency code validation
- Date range validation
"""

import re
from datetime import date

# =============================================================================
# CONSTANTS
# =============================================================================

# Asset code: letters, digits, dots, dashes and inner spaces ("Bond A", "BRK.B", "^SPX").
# Codes are case-sensitive and stored as given.
ASSET_CODE_PATTERN = re.compile(r"^[A-Za-z0-9^][A-Za-z0-9 .\-]{0,49}$")
ASSET_CODE_MAX_LENGTH = 50

# Currency: ISO 4217 format (3 uppercase letters)
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')


# =============================================================================
# ASSET CODE VALIDATION
# =============================================================================

def validate_asset_code(value: str) -> str:
    """
    Validate and normalize an asset code.

    Args:
        value: Raw asset code (e.g., " aapl ", "Bond A")

    Returns:
        Trimmed code (case preserved)

    Raises:
        ValueError: If the code is empty, too long or has invalid characters
    """
    if not value or not value.strip():
        raise ValueError("Asset code cannot be empty")

    normalized = value.strip()

    if len(normalized) > ASSET_CODE_MAX_LENGTH:
        raise ValueError(f"Asset code cannot exceed {ASSET_CODE_MAX_LENGTH} characters")

    if not ASSET_CODE_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid asset code: '{normalized}'. "
            "Use letters, digits, dots, dashes or spaces"
        )

    return normalized


def normalize_asset_code(value: str) -> str:
    """Normalize an asset code used as a search filter (no strict check)."""
    return value.strip() if value else ""


# =============================================================================
# CURRENCY VALIDATION
# =============================================================================

def validate_currency(value: str) -> str:
    """
    Validate and normalize a currency code.

    Raises:
        ValueError: If the value is not a 3-letter ISO code
    """
    if not value:
        raise ValueError("Currency cannot be empty")

    normalized = value.strip().upper()

    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid currency format: '{normalized}'. "
            "Currency must be a 3-letter ISO code (e.g., USD, EUR)"
        )

    return normalized


# =============================================================================
# DATE VALIDATION
# =============================================================================

def validate_date_range(start_date: date | None, end_date: date | None) -> None:
    """
    Check an optional inclusive date range.

    Raises:
        ValueError: If both bounds are given and start_date > end_date
    """
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError("start_date must be before or equal to end_date")
