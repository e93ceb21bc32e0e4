from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..audit.service import AuditService
from ..common.datetime_utils import today_local
from ..common.identity import Actor
from ..common.validators import require_leave_balance, require_non_empty, require_non_negative_amount
from ..core.constants import (
    DEFAULT_LOCAL_LEAVE,
    DEFAULT_LOCAL_LEAVE_DAYS,
    DEFAULT_SICK_LEAVE,
    DEFAULT_SICK_LEAVE_DAYS,
)
from ..core.enums import EmployeeStatus, LeaveStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..database.transaction import UnitOfWork
from ..leaves.accrual import prorated_entitlement
from ..leaves.model import LeaveFilter
from ..leaves.repository import LeaveRepository
from ..system_config.service import SystemConfigService
from .model import Employee, EmployeeFilter, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("employee_code", "first_name", "last_name", "email", "department", "job_title")
_AMOUNT_FIELDS = {
    "base_salary": "Base salary",
    "travelling_allowance": "Travelling allowance",
    "other_allowances": "Other allowances",
}
_BALANCE_FIELDS = {
    "local_leave_balance": "Local leave balance",
    "sick_leave_balance": "Sick leave balance",
}


@dataclass(frozen=True)
class EmployeeStats:
    active_employees: int
    on_leave_today: int
    pending_leaves: int
    departments: dict[str, int]


class EmployeeService:
    def __init__(
        self,
        employees: EmployeeRepository,
        leaves: LeaveRepository,
        configs: SystemConfigService,
        uow: UnitOfWork,
        audit: AuditService,
    ):
        self._employees = employees
        self._leaves = leaves
        self._configs = configs
        self._uow = uow
        self._audit = audit

    def _get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _ensure_unique(self, *, employee_code: str, email: str, exclude_id: Optional[int] = None) -> None:
        by_code = self._employees.get_by_code(employee_code)
        if by_code and by_code.id != exclude_id:
            raise ConflictError("Employee code already exists")
        by_email = self._employees.get_by_email(email)
        if by_email and by_email.id != exclude_id:
            raise ConflictError("Email already exists")

    def _opening_balance(
        self,
        explicit: Any,
        *,
        label: str,
        config_key: str,
        default_days: int,
        joining_date: date,
        use_proration: bool,
        today: date,
    ) -> Decimal:
        if explicit is not None:
            return require_leave_balance(explicit, label)
        annual = self._configs.get_int(config_key, default_days)
        if use_proration:
            return Decimal(prorated_entitlement(annual, joining_date, today=today))
        return Decimal(annual)

    def get_employee(self, *, actor: Actor, employee_id: int) -> Employee:
        if not actor.can_access_employee(employee_id):
            raise AuthorizationError("Unauthorized to view this employee")
        return self._get(employee_id)

    def list_employees(self, *, actor: Actor, criteria: EmployeeFilter) -> Sequence[Employee]:
        actor.require_manager()
        return self._employees.list(criteria)

    def create_employee(
        self,
        *,
        actor: Actor,
        employee_code: str,
        first_name: str,
        last_name: str,
        email: str,
        department: str,
        job_title: str,
        joining_date: date,
        base_salary: Any,
        travelling_allowance: Any = 0,
        other_allowances: Any = 0,
        local_leave_balance: Any = None,
        sick_leave_balance: Any = None,
        use_proration: bool = True,
        user_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> Employee:
        """Register an employee.

        Opening leave balances: an explicit value wins; otherwise the configured
        annual entitlement, prorated by joining month unless ``use_proration`` is off.
        """
        actor.require_admin()
        today = today or today_local()

        employee_code = require_non_empty(employee_code, "Employee code")
        email = require_non_empty(email, "Email").lower()
        self._ensure_unique(employee_code=employee_code, email=email)
        if user_id is not None and self._employees.get_by_user_id(user_id):
            raise ConflictError("User account is already linked to an employee")

        new = NewEmployee(
            employee_code=employee_code,
            first_name=require_non_empty(first_name, "First name"),
            last_name=require_non_empty(last_name, "Last name"),
            email=email,
            department=require_non_empty(department, "Department"),
            job_title=require_non_empty(job_title, "Job title"),
            joining_date=joining_date,
            base_salary=require_non_negative_amount(base_salary, "Base salary"),
            travelling_allowance=require_non_negative_amount(travelling_allowance, "Travelling allowance"),
            other_allowances=require_non_negative_amount(other_allowances, "Other allowances"),
            local_leave_balance=self._opening_balance(
                local_leave_balance,
                label="Local leave balance",
                config_key=DEFAULT_LOCAL_LEAVE,
                default_days=DEFAULT_LOCAL_LEAVE_DAYS,
                joining_date=joining_date,
                use_proration=use_proration,
                today=today,
            ),
            sick_leave_balance=self._opening_balance(
                sick_leave_balance,
                label="Sick leave balance",
                config_key=DEFAULT_SICK_LEAVE,
                default_days=DEFAULT_SICK_LEAVE_DAYS,
                joining_date=joining_date,
                use_proration=use_proration,
                today=today,
            ),
            user_id=user_id,
        )

        with self._uow.transaction():
            employee_id = self._employees.create(new)
            self._audit.record(actor=actor, action="CREATE", entity="EMPLOYEE", entity_id=employee_id, changes={"employee": new})

        logger.info("employee %s (%s) created by user %s", employee_id, employee_code, actor.user_id)
        return self._get(employee_id)

    def update_employee(self, *, actor: Actor, employee_id: int, changes: Mapping[str, Any]) -> Employee:
        """Partial update. Balances set here overwrite the ledger value (last writer wins)."""
        actor.require_admin()
        current = self._get(employee_id)

        values: dict[str, Any] = {}
        for name in _TEXT_FIELDS:
            if changes.get(name) is not None:
                values[name] = require_non_empty(str(changes[name]), name.replace("_", " ").capitalize())
        if "email" in values:
            values["email"] = values["email"].lower()
        for name, label in _AMOUNT_FIELDS.items():
            if changes.get(name) is not None:
                values[name] = require_non_negative_amount(changes[name], label)
        for name, label in _BALANCE_FIELDS.items():
            if changes.get(name) is not None:
                values[name] = require_leave_balance(changes[name], label)
        if changes.get("joining_date") is not None:
            values["joining_date"] = changes["joining_date"]
        if changes.get("status") is not None:
            try:
                values["status"] = EmployeeStatus(str(changes["status"]).upper())
            except ValueError:
                raise ValidationError(f"Invalid status: {changes['status']}")

        updated = dataclasses.replace(current, **values)
        if updated.employee_code != current.employee_code or updated.email != current.email:
            self._ensure_unique(employee_code=updated.employee_code, email=updated.email, exclude_id=current.id)

        with self._uow.transaction():
            self._employees.save(updated)
            self._audit.record(
                actor=actor,
                action="UPDATE",
                entity="EMPLOYEE",
                entity_id=current.id,
                changes=values,
            )
        return self._get(current.id)

    def deactivate_employee(self, *, actor: Actor, employee_id: int) -> Employee:
        actor.require_admin()
        employee = self._get(employee_id)
        with self._uow.transaction():
            self._employees.set_status(employee.id, EmployeeStatus.INACTIVE)
            self._audit.record(actor=actor, action="DEACTIVATE", entity="EMPLOYEE", entity_id=employee.id)

        logger.info("employee %s deactivated by user %s", employee.id, actor.user_id)
        return self._get(employee.id)

    def employee_stats(self, *, actor: Actor, today: Optional[date] = None) -> EmployeeStats:
        actor.require_manager()
        today = today or today_local()
        departments = self._employees.count_by_department(EmployeeStatus.ACTIVE)
        return EmployeeStats(
            active_employees=sum(departments.values()),
            on_leave_today=self._leaves.count(LeaveFilter(status=LeaveStatus.APPROVED, on_date=today)),
            pending_leaves=self._leaves.count(LeaveFilter(status=LeaveStatus.PENDING)),
            departments=departments,
        )
