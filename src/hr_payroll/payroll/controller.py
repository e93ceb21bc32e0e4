from __future__ import annotations

from flask import Flask

from ..common.http import arg_enum, arg_int, current_actor, json_body, ok
from ..container import Container
from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError
from .model import PayrollFilter


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="list_payrolls")
    def list_payrolls():
        criteria = PayrollFilter(
            employee_id=arg_int("employee_id"),
            month=arg_int("month"),
            year=arg_int("year"),
            status=arg_enum("status", PayrollStatus),
        )
        return ok(service.list_payrolls(actor=current_actor(), criteria=criteria))

    @app.route("/api/payroll/process", methods=["POST"], endpoint="process_payroll")
    def process_payroll():
        data = json_body()
        if data.get("month") is None or data.get("year") is None:
            raise ValidationError("Month and year are required")
        rows = service.process(actor=current_actor(), month=data["month"], year=data["year"])
        return ok({"message": f"Payroll processed for {len(rows)} employees", "payrolls": rows}, 201)

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="get_payroll")
    def get_payroll(payroll_id: int):
        return ok(service.get_payroll(actor=current_actor(), payroll_id=payroll_id))

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="update_payroll")
    def update_payroll(payroll_id: int):
        data = json_body()
        payroll = service.update(
            actor=current_actor(),
            payroll_id=payroll_id,
            base_salary=data.get("base_salary"),
            travelling_allowance=data.get("travelling_allowance"),
            other_allowances=data.get("other_allowances"),
            remarks=data.get("remarks"),
        )
        return ok(payroll)

    @app.route("/api/payroll/<int:payroll_id>/approve", methods=["POST"], endpoint="approve_payroll")
    def approve_payroll(payroll_id: int):
        return ok(service.approve(actor=current_actor(), payroll_id=payroll_id))

    @app.route("/api/payroll/<int:payroll_id>/lock", methods=["POST"], endpoint="lock_payroll")
    def lock_payroll(payroll_id: int):
        return ok(service.lock(actor=current_actor(), payroll_id=payroll_id))

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="delete_payroll")
    def delete_payroll(payroll_id: int):
        service.delete(actor=current_actor(), payroll_id=payroll_id)
        return ok({"message": "Payroll deleted"})
