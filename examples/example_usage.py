"""Example: drive the service layer directly, without Flask.

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from hr_payroll.common.identity import Actor
from hr_payroll.config import get_settings_module
from hr_payroll.container import build_container
from hr_payroll.core.enums import Role
from hr_payroll.leaves.model import LeaveFilter


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    admin = Actor(user_id=1, role=Role.ADMIN)
    print(container.report_service.dashboard(actor=admin))
    print(container.leave_service.list_leaves(actor=admin, criteria=LeaveFilter()))


if __name__ == "__main__":
    main()
