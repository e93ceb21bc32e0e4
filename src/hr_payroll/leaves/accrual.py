from __future__ import annotations

import math
from datetime import date
from fractions import Fraction
from typing import Optional

from ..common.datetime_utils import today_local


def prorated_entitlement(annual_entitlement: int, joining_date: date, *, today: Optional[date] = None) -> int:
    """Leave days granted to an employee who joins during the current year.

    Anyone who joined before this year gets the full entitlement, a hire dated
    after this year gets nothing, otherwise the entitlement is spread over the
    months left in the year (joining month included) and rounded up.
    """
    today = today or today_local()
    if joining_date < date(today.year, 1, 1):
        return int(annual_entitlement)
    if joining_date > date(today.year, 12, 31):
        return 0

    remaining_months = 12 - (joining_date.month - 1)
    return math.ceil(Fraction(int(annual_entitlement), 12) * remaining_months)
