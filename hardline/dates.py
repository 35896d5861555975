"""Calendar helpers shared by the charge engine and the reporting services."""
from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta


def parse_date(ds: str) -> date:
    return datetime.strptime(ds[:10], "%Y-%m-%d").date()


def parse_month(ms: str) -> date:
    """Return the first day of a ``YYYY-MM`` month string."""
    return datetime.strptime(ms, "%Y-%m").date()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(d: date) -> Tuple[date, date]:
    """First and last calendar day of the month containing ``d``."""
    return d.replace(day=1), d.replace(day=days_in_month(d.year, d.month))


def in_month(value: Optional[str], d: date) -> bool:
    """True if the ISO date/datetime string falls in the month of ``d``."""
    if not value:
        return False
    try:
        parsed = parse_date(value)
    except ValueError:
        return False
    return (parsed.year, parsed.month) == (d.year, d.month)


def clamp_day(year: int, month: int, day: int) -> date:
    last_day = days_in_month(year, month)
    if day < 1:
        day = 1
    if day > last_day:
        day = last_day
    return date(year, month, day)


def shift_months(d: date, months: int) -> date:
    return d + relativedelta(months=months)
