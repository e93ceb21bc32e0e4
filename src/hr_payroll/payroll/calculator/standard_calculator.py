from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import MONEY_QUANT
from ...core.exceptions import ValidationError
from ..model import Compensation, PayrollFigures
from .base import PayrollCalculator


def _money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: each day of absence costs one day of travelling allowance.

    Base salary and other allowances are never reduced; leave days are paid.
    """

    def calculate(self, compensation: Compensation, *, working_days: int, absence_days: int) -> PayrollFigures:
        if working_days <= 0:
            raise ValidationError("Working days per month must be greater than zero")

        travelling_allowance = Decimal(compensation.travelling_allowance)
        # Multiply first so whole-cent rates stay exact.
        travelling_deduction = _money(travelling_allowance * Decimal(absence_days) / Decimal(working_days))

        gross_salary = _money(
            Decimal(compensation.base_salary) + travelling_allowance + Decimal(compensation.other_allowances)
        )
        total_deductions = travelling_deduction
        return PayrollFigures(
            travelling_deduction=travelling_deduction,
            total_deductions=total_deductions,
            gross_salary=gross_salary,
            net_salary=gross_salary - total_deductions,
        )
