from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def days_between_inclusive(start: date, end: date) -> int:
    """Number of calendar days from start to end, both endpoints counted.

    The caller must ensure start <= end.
    """
    return math.ceil((end - start) / timedelta(days=1)) + 1


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5


def month_range(month: int, year: int) -> tuple[date, date]:
    """First and last day of the given month (1-12)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def working_days(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Weekdays in [start, end] that are not public holidays."""
    skip = set(holidays)
    return sum(1 for d in iter_days(start, end) if not is_weekend(d) and d not in skip)
