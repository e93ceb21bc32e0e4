from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..attendance.service import AttendanceService
from ..audit.service import AuditService
from ..common.datetime_utils import now_local
from ..common.identity import Actor
from ..common.validators import require_non_empty
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InsufficientBalanceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..database.transaction import UnitOfWork
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.notifier import Notifier
from .model import Leave, LeaveApplication, LeaveFilter, NewLeave
from .repository import LeaveRepository
from .rules import first_overlap, requested_days

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave ledger.

    Lifecycle::

        PENDING --approve--> APPROVED --cancel--> deleted (balance credited back)
        PENDING --reject---> REJECTED (terminal)
        PENDING --cancel---> deleted

    Balances are debited only on approval (or urgent creation). The debit is a
    conditional decrement inside the approval transaction, so two pending
    requests can never overdraw a balance together.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        attendance: AttendanceService,
        uow: UnitOfWork,
        notifier: Notifier,
        audit: AuditService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._attendance = attendance
        self._uow = uow
        self._notifier = notifier
        self._audit = audit
        self._clock = clock

    # ------------------------------------------------------------------ helpers

    def _get_leave(self, leave_id: int) -> Leave:
        leave = self._leaves.get_by_id(leave_id)
        if not leave:
            raise NotFoundError("Leave not found")
        return leave

    def _get_employee(self, employee_id: Optional[int]) -> Employee:
        employee = self._employees.get_by_id(employee_id) if employee_id is not None else None
        if not employee:
            raise NotFoundError("Employee record not found")
        return employee

    def _validate_application(self, application: LeaveApplication, *, enforce_notice: bool) -> Decimal:
        """Check dates and half-day fields; return the number of days requested."""
        require_non_empty(application.reason, "Reason")

        if application.end_date < application.start_date:
            raise ValidationError("End date must be on or after start date")

        if application.is_half_day:
            if application.start_date != application.end_date:
                raise ValidationError("A half-day leave must start and end on the same day")
            if application.half_day_period is None:
                raise ValidationError("Half-day period (MORNING or AFTERNOON) is required")
        elif application.half_day_period is not None:
            raise ValidationError("Half-day period is only allowed for half-day leave")

        if enforce_notice and application.leave_type == LeaveType.LOCAL:
            if application.start_date <= self._clock().date():
                raise ValidationError("Local leave must start after today")

        return requested_days(application.start_date, application.end_date, is_half_day=application.is_half_day)

    @staticmethod
    def _check_balance(employee: Employee, application: LeaveApplication, total_days: Decimal) -> None:
        available = employee.balance_for(application.leave_type)
        if total_days > available:
            raise InsufficientBalanceError(
                f"Insufficient {application.leave_type.value.lower()} leave balance. Available: {available} days"
            )

    def _check_overlap(self, employee_id: int, application: LeaveApplication, *, exclude_id: Optional[int] = None) -> None:
        candidates = self._leaves.find_active_in_range(
            employee_id=employee_id,
            start_date=application.start_date,
            end_date=application.end_date,
            exclude_id=exclude_id,
        )
        clash = first_overlap(
            candidates,
            start=application.start_date,
            end=application.end_date,
            is_half_day=application.is_half_day,
            half_day_period=application.half_day_period,
        )
        if clash:
            raise ConflictError(f"Overlapping leave request exists ({clash.start_date} to {clash.end_date})")

    def _debit(self, leave: Leave) -> None:
        if not self._employees.debit_balance(leave.employee_id, leave.leave_type, leave.total_days):
            raise InsufficientBalanceError(
                f"Insufficient {leave.leave_type.value.lower()} leave balance to approve {leave.total_days} days"
            )

    # ------------------------------------------------------------------ queries

    def get_leave(self, *, actor: Actor, leave_id: int) -> Leave:
        leave = self._get_leave(leave_id)
        if not actor.can_access_employee(leave.employee_id):
            raise AuthorizationError("Unauthorized to view this leave")
        return leave

    def list_leaves(self, *, actor: Actor, criteria: LeaveFilter) -> Sequence[Leave]:
        if actor.role == Role.EMPLOYEE:
            criteria = dataclasses.replace(criteria, employee_id=actor.employee_id)
        return self._leaves.list(criteria)

    # ---------------------------------------------------------------- use cases

    def apply(self, *, actor: Actor, application: LeaveApplication) -> Leave:
        employee = self._get_employee(actor.employee_id)
        if not employee.is_active:
            raise AuthorizationError("Cannot apply leave - account not active")

        total_days = self._validate_application(application, enforce_notice=True)
        self._check_balance(employee, application, total_days)
        self._check_overlap(employee.id, application)

        leave_id = self._leaves.create(
            NewLeave(
                employee_id=employee.id,
                leave_type=application.leave_type,
                start_date=application.start_date,
                end_date=application.end_date,
                total_days=total_days,
                reason=application.reason.strip(),
                is_half_day=application.is_half_day,
                half_day_period=application.half_day_period,
            )
        )
        leave = self._get_leave(leave_id)
        logger.info("leave %s submitted by employee %s (%s days)", leave.id, employee.id, total_days)

        self._notifier.leave_submitted(leave, employee)
        return leave

    def approve(self, *, actor: Actor, leave_id: int) -> Leave:
        actor.require_manager()

        with self._uow.transaction():
            leave = self._get_leave(leave_id)
            if leave.status != LeaveStatus.PENDING:
                raise InvalidStateError("Leave has already been processed")

            if not self._leaves.mark_approved(leave_id=leave.id, approved_by=actor.user_id, approved_at=self._clock()):
                raise InvalidStateError("Leave has already been processed")
            self._debit(leave)
            approved = self._get_leave(leave.id)
            self._attendance.materialize_leave(approved)
            self._audit.record(actor=actor, action="APPROVE_LEAVE", entity="LEAVE", entity_id=leave.id, changes={"leave": approved})

        logger.info("leave %s approved by user %s", leave.id, actor.user_id)
        self._notifier.leave_decided(approved, self._get_employee(approved.employee_id))
        return approved

    def reject(self, *, actor: Actor, leave_id: int, reason: str) -> Leave:
        actor.require_manager()
        reason = require_non_empty(reason, "Rejection reason")

        with self._uow.transaction():
            leave = self._get_leave(leave_id)
            if leave.status != LeaveStatus.PENDING:
                raise InvalidStateError("Leave has already been processed")

            if not self._leaves.mark_rejected(
                leave_id=leave.id,
                rejected_by=actor.user_id,
                rejected_at=self._clock(),
                reason=reason,
            ):
                raise InvalidStateError("Leave has already been processed")
            rejected = self._get_leave(leave.id)
            self._audit.record(actor=actor, action="REJECT_LEAVE", entity="LEAVE", entity_id=leave.id, changes={"leave": rejected})

        logger.info("leave %s rejected by user %s", leave.id, actor.user_id)
        self._notifier.leave_decided(rejected, self._get_employee(rejected.employee_id))
        return rejected

    def add_urgent_leave(self, *, actor: Actor, employee_id: int, application: LeaveApplication) -> Leave:
        """Admin path: the leave is created already APPROVED, skipping the PENDING phase."""
        actor.require_manager()

        employee = self._get_employee(employee_id)
        total_days = self._validate_application(application, enforce_notice=False)
        self._check_balance(employee, application, total_days)

        with self._uow.transaction():
            self._check_overlap(employee.id, application)
            leave_id = self._leaves.create(
                NewLeave(
                    employee_id=employee.id,
                    leave_type=application.leave_type,
                    start_date=application.start_date,
                    end_date=application.end_date,
                    total_days=total_days,
                    reason=application.reason.strip(),
                    status=LeaveStatus.APPROVED,
                    is_half_day=application.is_half_day,
                    half_day_period=application.half_day_period,
                    is_urgent=True,
                    approved_by=actor.user_id,
                    approved_at=self._clock(),
                )
            )
            leave = self._get_leave(leave_id)
            self._debit(leave)
            self._attendance.materialize_leave(leave)
            self._audit.record(actor=actor, action="ADD_URGENT_LEAVE", entity="LEAVE", entity_id=leave.id, changes={"leave": leave})

        logger.info("urgent leave %s added for employee %s by user %s", leave.id, employee.id, actor.user_id)
        self._notifier.leave_decided(leave, employee)
        return leave

    def update(self, *, actor: Actor, leave_id: int, application: LeaveApplication) -> Leave:
        leave = self._get_leave(leave_id)
        if actor.employee_id is None or leave.employee_id != actor.employee_id:
            raise AuthorizationError("Unauthorized to update this leave")
        if leave.status != LeaveStatus.PENDING:
            raise InvalidStateError("Can only update pending leave")

        employee = self._get_employee(leave.employee_id)
        total_days = self._validate_application(application, enforce_notice=True)
        # Checked against the current balance; nothing was reserved for this leave.
        self._check_balance(employee, application, total_days)
        self._check_overlap(employee.id, application, exclude_id=leave.id)

        edited = dataclasses.replace(
            leave,
            leave_type=application.leave_type,
            start_date=application.start_date,
            end_date=application.end_date,
            total_days=total_days,
            reason=application.reason.strip(),
            is_half_day=application.is_half_day,
            half_day_period=application.half_day_period,
        )
        if not self._leaves.update_pending(edited):
            raise InvalidStateError("Can only update pending leave")
        return self._get_leave(leave.id)

    def cancel(self, *, actor: Actor, leave_id: int) -> None:
        leave = self._get_leave(leave_id)
        if actor.role == Role.EMPLOYEE and leave.employee_id != actor.employee_id:
            raise AuthorizationError("Unauthorized to cancel this leave")
        if leave.status == LeaveStatus.REJECTED:
            raise InvalidStateError("Cannot cancel rejected leave")

        with self._uow.transaction():
            current = self._get_leave(leave_id)
            if current.status == LeaveStatus.REJECTED:
                raise InvalidStateError("Cannot cancel rejected leave")
            if current.status == LeaveStatus.APPROVED:
                self._employees.credit_balance(current.employee_id, current.leave_type, current.total_days)
                self._attendance.release_leave(current, remaining_half=self._other_approved_half(current))
            self._leaves.delete(current.id)
            self._audit.record(actor=actor, action="CANCEL_LEAVE", entity="LEAVE", entity_id=current.id, changes={"leave": current})

        logger.info("leave %s (%s) cancelled by user %s", leave.id, current.status.value, actor.user_id)

    def _other_approved_half(self, leave: Leave) -> Optional[Leave]:
        if not leave.is_half_day:
            return None
        same_day = self._leaves.find_active_in_range(
            employee_id=leave.employee_id,
            start_date=leave.start_date,
            end_date=leave.start_date,
            exclude_id=leave.id,
        )
        for other in same_day:
            if other.is_half_day and other.status == LeaveStatus.APPROVED:
                return other
        return None
