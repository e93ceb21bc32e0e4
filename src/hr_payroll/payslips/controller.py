from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payslip_service

    @app.route("/api/payslips/generate/<int:payroll_id>", methods=["POST"], endpoint="generate_payslip")
    def generate_payslip(payroll_id: int):
        generated = service.generate(actor=current_actor(), payroll_id=payroll_id)
        return ok({"message": "Payslip generated successfully", "payslip": generated.payslip, "data": generated.data})

    @app.route("/api/payslips/<int:payroll_id>", methods=["GET"], endpoint="get_payslip")
    def get_payslip(payroll_id: int):
        return ok(service.get_payslip(actor=current_actor(), payroll_id=payroll_id))

    @app.route("/api/payslips/employee/<int:employee_id>", methods=["GET"], endpoint="employee_payslips")
    def employee_payslips(employee_id: int):
        return ok(service.list_for_employee(actor=current_actor(), employee_id=employee_id))
