from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, LeaveType
from .model import Employee, EmployeeFilter, NewEmployee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note: services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, new: NewEmployee) -> int:
        raise NotImplementedError

    def save(self, employee: Employee) -> bool:
        """Overwrite every mutable field of an existing row (last writer wins)."""

        raise NotImplementedError

    def set_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        raise NotImplementedError

    def list(self, criteria: EmployeeFilter) -> Sequence[Employee]:
        raise NotImplementedError

    def debit_balance(self, employee_id: int, leave_type: LeaveType, days: Decimal) -> bool:
        """Decrement the balance only if it stays >= 0. False when nothing was debited."""

        raise NotImplementedError

    def credit_balance(self, employee_id: int, leave_type: LeaveType, days: Decimal) -> bool:
        raise NotImplementedError

    def count_by_department(self, status: EmployeeStatus) -> dict[str, int]:
        raise NotImplementedError
