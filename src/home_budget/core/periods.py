"""Financial month arithmetic.

A household can start its "month" on payday instead of the 1st. With start
day 25, the financial month of 2024-03-10 runs 2024-02-25 .. 2024-03-24.
Start days past the end of a short month are clamped to its last day.
"""

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


def _clamped(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def financial_month_bounds(day: date, start_day: int = 1) -> tuple[date, date]:
    """First and last day (inclusive) of the financial month containing ``day``."""
    if start_day <= 1:
        last = calendar.monthrange(day.year, day.month)[1]
        return day.replace(day=1), day.replace(day=last)

    start = _clamped(day.year, day.month, start_day)
    if day < start:
        previous = day.replace(day=1) - relativedelta(months=1)
        start = _clamped(previous.year, previous.month, start_day)

    following = start.replace(day=1) + relativedelta(months=1)
    end = _clamped(following.year, following.month, start_day) - timedelta(days=1)
    return start, end


def lookback_start(today: date, months: int, start_day: int = 1) -> date:
    """Start of the financial month ``months`` months before ``today``'s."""
    current_start, _ = financial_month_bounds(today, start_day)
    shifted = current_start.replace(day=1) - relativedelta(months=months)
    if start_day <= 1:
        return shifted
    return _clamped(shifted.year, shifted.month, start_day)
