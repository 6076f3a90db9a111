# backend/portfolio_tracker/utils/date_utils.py
"""
Date helpers shared by the aggregation services.

Month labels are "YYYY-MM" strings; weeks start on Sunday.
"""

from datetime import date, timedelta


def month_label(d: date) -> str:
    """Return the "YYYY-MM" label of the month containing d."""
    return f"{d.year:04d}-{d.month:02d}"


def trailing_month_labels(months_back: int, today: date) -> list[str]:
    """
    Labels for months_back consecutive months ending with today's month.

    Example:
        >>> trailing_month_labels(3, date(2024, 2, 10))
        ['2023-12', '2024-01', '2024-02']
    """
    labels = []
    year, month = today.year, today.month
    for _ in range(months_back):
        labels.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    labels.reverse()
    return labels


def week_start(d: date) -> date:
    """Return the Sunday on or before d."""
    # weekday(): Monday=0 ... Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def parse_iso_date(value: str | date) -> date:
    """
    Parse an ISO date, tolerating a trailing time component.

    Stored price histories hold plain "YYYY-MM-DD" strings, but imported
    data sometimes carries full timestamps.
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])
