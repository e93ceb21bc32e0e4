from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType


@dataclass(frozen=True)
class Leave:
    """Domain entity: a leave request and its approval state."""

    id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    status: LeaveStatus
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    is_urgent: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveApplication:
    """What the caller asks for; dates and half-day fields are validated by the service."""

    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None


@dataclass(frozen=True)
class NewLeave:
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    is_urgent: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveFilter:
    """Typed query filter. ``on_date`` matches leaves whose range covers that day."""

    employee_id: Optional[int] = None
    status: Optional[LeaveStatus] = None
    leave_type: Optional[LeaveType] = None
    start_from: Optional[date] = None
    end_to: Optional[date] = None
    on_date: Optional[date] = None
