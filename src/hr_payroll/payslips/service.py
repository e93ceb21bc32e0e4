from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.identity import Actor
from ..core.constants import COMPANY_ADDRESS, COMPANY_EMAIL, COMPANY_NAME, COMPANY_PHONE, PAYSLIP_COMPANY_FALLBACKS
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..payroll.model import Payroll
from ..payroll.repository import PayrollRepository
from ..system_config.service import SystemConfigService
from .model import GeneratedPayslip, NewPayslip, PayslipCompany, PayslipData, PayslipEmployee, PayslipSummary
from .repository import PayslipRepository

logger = logging.getLogger(__name__)


def payslip_file_name(employee: Employee, payroll: Payroll) -> str:
    return f"payslip_{employee.employee_code}_{payroll.month}_{payroll.year}.pdf"


class PayslipService:
    """Assembles payslip data from a payroll snapshot and keeps one payslip record per payroll.

    Rendering the document is left to the caller; ``PayslipData`` carries
    everything it needs. Company details come from system config, then
    ``company_defaults``.
    """

    def __init__(
        self,
        payslips: PayslipRepository,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        configs: SystemConfigService,
        *,
        company_defaults: Optional[Mapping[str, str]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payslips = payslips
        self._payrolls = payrolls
        self._employees = employees
        self._configs = configs
        self._company_defaults = dict(company_defaults or PAYSLIP_COMPANY_FALLBACKS)
        self._clock = clock

    def _company(self) -> PayslipCompany:
        def value(key: str) -> str:
            return self._configs.get_value(key) or self._company_defaults.get(key) or PAYSLIP_COMPANY_FALLBACKS[key]

        return PayslipCompany(
            name=value(COMPANY_NAME),
            address=value(COMPANY_ADDRESS),
            phone=value(COMPANY_PHONE),
            email=value(COMPANY_EMAIL),
        )

    def _load(self, actor: Actor, payroll_id: int) -> tuple[Payroll, Employee]:
        payroll = self._payrolls.get_by_id(payroll_id)
        if not payroll:
            raise NotFoundError("Payroll not found")
        if not actor.can_access_employee(payroll.employee_id):
            raise AuthorizationError("Unauthorized to view this payslip")
        employee = self._employees.get_by_id(payroll.employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return payroll, employee

    def _data(self, payroll: Payroll, employee: Employee) -> PayslipData:
        return PayslipData(
            employee=PayslipEmployee(
                employee_code=employee.employee_code,
                first_name=employee.first_name,
                last_name=employee.last_name,
                email=employee.email,
                department=employee.department,
                job_title=employee.job_title,
            ),
            payroll=payroll,
            company=self._company(),
        )

    def generate(self, *, actor: Actor, payroll_id: int) -> GeneratedPayslip:
        payroll, employee = self._load(actor, payroll_id)
        data = self._data(payroll, employee)

        self._payslips.upsert(
            NewPayslip(
                payroll_id=payroll.id,
                employee_id=payroll.employee_id,
                file_name=payslip_file_name(employee, payroll),
                generated_at=self._clock(),
            )
        )
        logger.info("payslip for payroll %s (%s %s/%s) generated by user %s", payroll.id, employee.employee_code, payroll.month, payroll.year, actor.user_id)
        return GeneratedPayslip(payslip=self._payslips.get_by_payroll_id(payroll.id), data=data)

    def get_payslip(self, *, actor: Actor, payroll_id: int) -> GeneratedPayslip:
        payroll, employee = self._load(actor, payroll_id)
        payslip = self._payslips.get_by_payroll_id(payroll.id)
        if not payslip:
            raise NotFoundError("Payslip not found")
        return GeneratedPayslip(payslip=payslip, data=self._data(payroll, employee))

    def list_for_employee(self, *, actor: Actor, employee_id: int) -> Sequence[PayslipSummary]:
        if not actor.can_access_employee(employee_id):
            raise AuthorizationError("Unauthorized to view these payslips")
        return self._payslips.list_for_employee(employee_id)
