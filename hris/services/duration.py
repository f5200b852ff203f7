"""Business-day counting for leave requests.

A business day is any calendar day that is not a Saturday or Sunday.
Public holidays are deliberately not excluded.
"""

from __future__ import annotations

from datetime import date, timedelta

_ONE_DAY = timedelta(days=1)


def is_business_day(day: date) -> bool:
    """Return True for Monday through Friday."""
    return day.weekday() < 5


def count_business_days(start_date: date, end_date: date) -> int:
    """Count weekdays in the inclusive range [start_date, end_date].

    Returns 0 when end_date precedes start_date.
    """
    total = 0
    current = start_date
    while current <= end_date:
        if is_business_day(current):
            total += 1
        current += _ONE_DAY
    return total

