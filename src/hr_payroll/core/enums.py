from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization checks."""

    ADMIN = "ADMIN"
    EMPLOYER = "EMPLOYER"
    EMPLOYEE = "EMPLOYEE"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class LeaveType(str, Enum):
    LOCAL = "LOCAL"
    SICK = "SICK"


class LeaveStatus(str, Enum):
    """Leave approval flow. APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class HalfDayPeriod(str, Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"


class PayrollStatus(str, Enum):
    """Forward-only chain: DRAFT -> APPROVED -> LOCKED."""

    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    LOCKED = "LOCKED"
