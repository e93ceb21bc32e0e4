from __future__ import annotations

import logging
from typing import Protocol

from ..employees.model import Employee
from ..leaves.model import Leave

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Outbound notification port (email, chat, ...)."""

    def leave_submitted(self, leave: Leave, employee: Employee) -> None:
        """Tell administrators a new leave request is waiting."""

        raise NotImplementedError

    def leave_decided(self, leave: Leave, employee: Employee) -> None:
        """Tell the employee their leave was approved or rejected."""

        raise NotImplementedError


class LoggingNotifier:
    """Default sink: writes the notification to the log instead of delivering it."""

    def leave_submitted(self, leave: Leave, employee: Employee) -> None:
        logger.info(
            "[notify admins] %s (%s) requested %s leave %s -> %s (%s days)",
            employee.full_name,
            employee.employee_code,
            leave.leave_type.value,
            leave.start_date,
            leave.end_date,
            leave.total_days,
        )

    def leave_decided(self, leave: Leave, employee: Employee) -> None:
        logger.info(
            "[notify %s] leave %s %s -> %s is %s",
            employee.email,
            leave.id,
            leave.start_date,
            leave.end_date,
            leave.status.value,
        )


class SafeNotifier:
    """Fire-and-forget wrapper: failures of the wrapped sink are logged, never raised.

    Callers invoke it only after their transaction has committed.
    """

    def __init__(self, sink: Notifier):
        self._sink = sink

    def leave_submitted(self, leave: Leave, employee: Employee) -> None:
        try:
            self._sink.leave_submitted(leave, employee)
        except Exception:
            logger.exception("leave_submitted notification failed for leave %s", leave.id)

    def leave_decided(self, leave: Leave, employee: Employee) -> None:
        try:
            self._sink.leave_decided(leave, employee)
        except Exception:
            logger.exception("leave_decided notification failed for leave %s", leave.id)
