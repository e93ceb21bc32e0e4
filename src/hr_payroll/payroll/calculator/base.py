from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import Compensation, PayrollFigures


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, compensation: Compensation, *, working_days: int, absence_days: int) -> PayrollFigures:
        raise NotImplementedError
