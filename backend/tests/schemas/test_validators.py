# backend/tests/schemas/test_validators.py
"""
Tests for the shared schema validators.
"""

from datetime import date

import pytest

from portfolio_tracker.schemas.validators import (
    validate_asset_code,
    validate_currency,
    validate_date_range,
)


class TestAssetCode:

    @pytest.mark.parametrize("code", ["AAPL", "Bond A", "BRK.B", "^SPX", "aapl"])
    def test_valid(self, code):
        assert validate_asset_code(code) == code

    def test_trimmed_case_preserved(self):
        assert validate_asset_code("  Bond A ") == "Bond A"

    @pytest.mark.parametrize("code", ["", "   ", "AA$PL", "-AAPL", "A" * 51])
    def test_invalid(self, code):
        with pytest.raises(ValueError):
            validate_asset_code(code)


class TestCurrency:

    def test_normalized(self):
        assert validate_currency(" usd ") == "USD"

    @pytest.mark.parametrize("value", ["", "US", "US1", "EURO"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_currency(value)


class TestDateRange:

    def test_open_bounds(self):
        validate_date_range(None, date(2024, 1, 1))
        validate_date_range(date(2024, 1, 1), None)

    def test_equal_bounds(self):
        validate_date_range(date(2024, 1, 1), date(2024, 1, 1))

    def test_inverted(self):
        with pytest.raises(ValueError):
            validate_date_range(date(2024, 2, 1), date(2024, 1, 1))
