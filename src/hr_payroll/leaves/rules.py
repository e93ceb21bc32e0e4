from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..common.datetime_utils import days_between_inclusive
from ..core.constants import HALF_DAY
from ..core.enums import HalfDayPeriod
from .model import Leave


def requested_days(start: date, end: date, *, is_half_day: bool) -> Decimal:
    if is_half_day:
        return HALF_DAY
    return Decimal(days_between_inclusive(start, end))


def overlaps(
    existing: Leave,
    *,
    start: date,
    end: date,
    is_half_day: bool,
    half_day_period: Optional[HalfDayPeriod],
) -> bool:
    """True when ``existing`` blocks a request for [start, end].

    Two half-day leaves on the same day only clash when they claim the same half.
    """
    if existing.start_date > end or existing.end_date < start:
        return False
    if (
        is_half_day
        and existing.is_half_day
        and existing.start_date == start
        and existing.half_day_period != half_day_period
    ):
        return False
    return True


def first_overlap(
    candidates: Iterable[Leave],
    *,
    start: date,
    end: date,
    is_half_day: bool,
    half_day_period: Optional[HalfDayPeriod],
) -> Optional[Leave]:
    for leave in candidates:
        if overlaps(leave, start=start, end=end, is_half_day=is_half_day, half_day_period=half_day_period):
            return leave
    return None
