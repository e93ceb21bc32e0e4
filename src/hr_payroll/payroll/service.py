from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import summarize
from ..attendance.service import AttendanceService
from ..audit.service import AuditService
from ..common.datetime_utils import month_range, now_local
from ..common.identity import Actor
from ..common.validators import require_month, require_non_negative_amount
from ..core.constants import DEFAULT_WORKING_DAYS, WORKING_DAYS_PER_MONTH
from ..core.enums import EmployeeStatus, PayrollStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, InvalidStateError, NotFoundError, ValidationError
from ..database.transaction import UnitOfWork
from ..employees.model import EmployeeFilter
from ..employees.repository import EmployeeRepository
from ..system_config.service import SystemConfigService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Compensation, NewPayroll, Payroll, PayrollFilter
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Monthly payroll.

    Lifecycle::

        DRAFT --approve--> APPROVED --lock--> LOCKED (immutable)

    Each row snapshots the employee's compensation and the month's attendance
    counts at processing time; later edits to the employee do not flow back.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceService,
        configs: SystemConfigService,
        uow: UnitOfWork,
        audit: AuditService,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._configs = configs
        self._uow = uow
        self._audit = audit
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def _get_payroll(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(payroll_id)
        if not payroll:
            raise NotFoundError("Payroll not found")
        return payroll

    def get_payroll(self, *, actor: Actor, payroll_id: int) -> Payroll:
        payroll = self._get_payroll(payroll_id)
        if not actor.can_access_employee(payroll.employee_id):
            raise AuthorizationError("Unauthorized to view this payroll")
        return payroll

    def list_payrolls(self, *, actor: Actor, criteria: PayrollFilter) -> Sequence[Payroll]:
        if actor.role == Role.EMPLOYEE:
            criteria = dataclasses.replace(criteria, employee_id=actor.employee_id)
        return self._payrolls.list(criteria)

    def process(self, *, actor: Actor, month: int, year: int) -> Sequence[Payroll]:
        """Create one DRAFT row per active employee for the month."""
        actor.require_manager()
        month, year = require_month(month, year)

        if self._payrolls.exists_for_month(month=month, year=year):
            raise ConflictError(f"Payroll for {month:02d}/{year} already processed")

        employees = self._employees.list(EmployeeFilter(status=EmployeeStatus.ACTIVE))
        if not employees:
            raise ValidationError("No active employees found")

        working_days = self._configs.get_int(WORKING_DAYS_PER_MONTH, DEFAULT_WORKING_DAYS)
        start, end = month_range(month, year)

        rows: list[NewPayroll] = []
        for employee in employees:
            counts = summarize(self._attendance.records_between(employee_id=employee.id, start=start, end=end))
            compensation = Compensation(
                base_salary=employee.base_salary,
                travelling_allowance=employee.travelling_allowance,
                other_allowances=employee.other_allowances,
            )
            figures = self._calculator.calculate(
                compensation,
                working_days=working_days,
                absence_days=counts.absence_days,
            )
            rows.append(
                NewPayroll(
                    employee_id=employee.id,
                    month=month,
                    year=year,
                    working_days=working_days,
                    present_days=counts.present_days,
                    leave_days=counts.leave_days,
                    absence_days=counts.absence_days,
                    compensation=compensation,
                    figures=figures,
                )
            )

        with self._uow.transaction():
            created = self._payrolls.create_many(rows)
            self._audit.record(
                actor=actor,
                action="PROCESS_PAYROLL",
                entity="PAYROLL",
                entity_id=f"{year}-{month:02d}",
                changes={"month": month, "year": year, "count": created, "working_days": working_days},
            )

        logger.info("payroll %02d/%s processed: %d rows by user %s", month, year, created, actor.user_id)
        return self._payrolls.list(PayrollFilter(month=month, year=year))

    def approve(self, *, actor: Actor, payroll_id: int) -> Payroll:
        actor.require_manager()
        with self._uow.transaction():
            payroll = self._get_payroll(payroll_id)
            if payroll.is_locked:
                raise InvalidStateError("Cannot approve locked payroll")
            if not self._payrolls.mark_approved(payroll_id=payroll.id, approved_by=actor.user_id, approved_at=self._clock()):
                raise InvalidStateError("Cannot approve locked payroll")
            self._audit.record(actor=actor, action="APPROVE_PAYROLL", entity="PAYROLL", entity_id=payroll.id)

        logger.info("payroll %s approved by user %s", payroll.id, actor.user_id)
        return self._get_payroll(payroll.id)

    def lock(self, *, actor: Actor, payroll_id: int) -> Payroll:
        actor.require_manager()
        with self._uow.transaction():
            payroll = self._get_payroll(payroll_id)
            if payroll.status != PayrollStatus.APPROVED:
                raise InvalidStateError("Only approved payroll can be locked")
            if not self._payrolls.mark_locked(payroll_id=payroll.id):
                raise InvalidStateError("Only approved payroll can be locked")
            self._audit.record(actor=actor, action="LOCK_PAYROLL", entity="PAYROLL", entity_id=payroll.id)

        logger.info("payroll %s locked by user %s", payroll.id, actor.user_id)
        return self._get_payroll(payroll.id)

    def update(
        self,
        *,
        actor: Actor,
        payroll_id: int,
        base_salary=None,
        travelling_allowance=None,
        other_allowances=None,
        remarks: Optional[str] = None,
    ) -> Payroll:
        """Adjust compensation and recompute against the stored working/absence days."""
        actor.require_manager()
        with self._uow.transaction():
            payroll = self._get_payroll(payroll_id)
            if payroll.is_locked:
                raise InvalidStateError("Cannot modify locked payroll")

            compensation = Compensation(
                base_salary=payroll.base_salary
                if base_salary is None
                else require_non_negative_amount(base_salary, "Base salary"),
                travelling_allowance=payroll.travelling_allowance
                if travelling_allowance is None
                else require_non_negative_amount(travelling_allowance, "Travelling allowance"),
                other_allowances=payroll.other_allowances
                if other_allowances is None
                else require_non_negative_amount(other_allowances, "Other allowances"),
            )
            figures = self._calculator.calculate(
                compensation,
                working_days=payroll.working_days,
                absence_days=payroll.absence_days,
            )
            updated = dataclasses.replace(
                payroll,
                base_salary=compensation.base_salary,
                travelling_allowance=compensation.travelling_allowance,
                other_allowances=compensation.other_allowances,
                travelling_deduction=figures.travelling_deduction,
                total_deductions=figures.total_deductions,
                gross_salary=figures.gross_salary,
                net_salary=figures.net_salary,
                remarks=payroll.remarks if remarks is None else remarks,
            )
            if not self._payrolls.save_amounts(updated):
                raise InvalidStateError("Cannot modify locked payroll")
            self._audit.record(
                actor=actor,
                action="UPDATE_PAYROLL",
                entity="PAYROLL",
                entity_id=payroll.id,
                changes={"before": payroll, "after": updated},
            )

        return self._get_payroll(payroll.id)

    def delete(self, *, actor: Actor, payroll_id: int) -> None:
        actor.require_manager()
        with self._uow.transaction():
            payroll = self._get_payroll(payroll_id)
            if payroll.is_locked:
                raise InvalidStateError("Cannot delete locked payroll")
            if not self._payrolls.delete(payroll.id):
                raise InvalidStateError("Cannot delete locked payroll")
            self._audit.record(actor=actor, action="DELETE_PAYROLL", entity="PAYROLL", entity_id=payroll.id, changes={"payroll": payroll})

        logger.info("payroll %s deleted by user %s", payroll.id, actor.user_id)
