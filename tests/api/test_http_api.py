from __future__ import annotations

import pytest

from hr_payroll.main import create_app
from tests.fakes import build_world


def _headers(role="ADMIN", user_id=1, employee_id=None):
    headers = {"X-User-Id": str(user_id), "X-User-Role": role}
    if employee_id is not None:
        headers["X-Employee-Id"] = str(employee_id)
    return headers


@pytest.fixture()
def world():
    return build_world()


@pytest.fixture()
def client(world):
    app = create_app(container=world.container)
    app.config["TESTING"] = True
    return app.test_client()


def test_missing_identity_is_unauthenticated(client):
    resp = client.get("/api/leaves")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Authentication required"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope", headers=_headers())
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_leave_flow_over_http(client, world):
    emp = world.add_employee()
    me = _headers("EMPLOYEE", user_id=50, employee_id=emp.id)

    resp = client.post(
        "/api/leaves",
        json={"leave_type": "local", "start_date": "2026-06-10", "end_date": "2026-06-12", "reason": "Trip"},
        headers=me,
    )
    assert resp.status_code == 201
    leave = resp.get_json()
    assert leave["status"] == "PENDING"
    assert leave["total_days"] == "3"

    resp = client.post(f"/api/leaves/{leave['id']}/approve", headers=me)
    assert resp.status_code == 403

    resp = client.post(f"/api/leaves/{leave['id']}/approve", headers=_headers("EMPLOYER", user_id=2))
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "APPROVED"

    resp = client.post(f"/api/leaves/{leave['id']}/approve", headers=_headers())
    assert resp.status_code == 400

    resp = client.get(f"/api/employees/{emp.id}", headers=me)
    assert resp.get_json()["local_leave_balance"] == "12"

    resp = client.delete(f"/api/leaves/{leave['id']}", headers=me)
    assert resp.status_code == 200
    assert world.employee(emp.id).local_leave_balance == 15


def test_validation_and_not_found_errors(client, world):
    emp = world.add_employee()
    me = _headers("EMPLOYEE", user_id=50, employee_id=emp.id)

    resp = client.post("/api/leaves", json={"leave_type": "LOCAL", "start_date": "junk"}, headers=me)
    assert resp.status_code == 400

    resp = client.get("/api/leaves/999", headers=_headers())
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Leave not found"}


def test_payroll_over_http(client, world):
    world.add_employee()
    admin = _headers()

    resp = client.post("/api/payroll/process", json={"month": 5, "year": 2026}, headers=admin)
    assert resp.status_code == 201
    payroll = resp.get_json()["payrolls"][0]
    assert payroll["net_salary"] == "5540.00"

    assert client.post("/api/payroll/process", json={"month": 5, "year": 2026}, headers=admin).status_code == 400
    assert client.post(f"/api/payroll/{payroll['id']}/approve", headers=admin).status_code == 200
    assert client.post(f"/api/payroll/{payroll['id']}/lock", headers=admin).status_code == 200

    resp = client.delete(f"/api/payroll/{payroll['id']}", headers=admin)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Cannot delete locked payroll"}


def test_config_and_holidays_over_http(client):
    admin = _headers()

    resp = client.put("/api/config/WORKING_DAYS_PER_MONTH", json={"value": 21}, headers=admin)
    assert resp.status_code == 200
    assert client.get("/api/config", headers=admin).get_json() == {"WORKING_DAYS_PER_MONTH": "21"}

    resp = client.post("/api/holidays", json={"name": "Labour Day", "date": "2026-05-01"}, headers=admin)
    assert resp.status_code == 201
    assert resp.get_json()["holiday_date"] == "2026-05-01"

    resp = client.get(
        "/api/holidays/working-days",
        query_string={"start_date": "2026-05-01", "end_date": "2026-05-31"},
        headers=admin,
    )
    assert resp.get_json()["working_days"] == 20


def test_create_employee_over_http(client):
    resp = client.post(
        "/api/employees",
        json={
            "employee_code": "E9",
            "first_name": "Grace",
            "last_name": "Hopper",
            "email": "grace@example.com",
            "department": "Engineering",
            "job_title": "Admiral",
            "joining_date": "2020-01-01",
            "base_salary": "6000",
        },
        headers=_headers(),
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "ACTIVE"
    assert body["local_leave_balance"] == "15"

    resp = client.get("/api/employees", query_string={"status": "bogus"}, headers=_headers())
    assert resp.status_code == 400


def test_payslips_over_http(client, world):
    emp = world.add_employee(employee_code="E7")
    other = world.add_employee()
    admin = _headers()
    rows = client.post("/api/payroll/process", json={"month": 5, "year": 2026}, headers=admin).get_json()["payrolls"]
    payroll = next(p for p in rows if p["employee_id"] == emp.id)

    resp = client.post(f"/api/payslips/generate/{payroll['id']}", headers=admin)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["payslip"]["file_name"] == "payslip_E7_5_2026.pdf"
    assert body["data"]["company"]["name"] == "Company Name"
    assert body["data"]["payroll"]["net_salary"] == "5540.00"

    me = _headers("EMPLOYEE", user_id=50, employee_id=emp.id)
    resp = client.get(f"/api/payslips/employee/{emp.id}", headers=me)
    assert resp.status_code == 200
    assert [p["month"] for p in resp.get_json()] == [5]

    stranger = _headers("EMPLOYEE", user_id=51, employee_id=other.id)
    assert client.get(f"/api/payslips/employee/{emp.id}", headers=stranger).status_code == 403
    assert client.get(f"/api/payslips/{payroll['id']}", headers=stranger).status_code == 403
    assert client.get("/api/payslips/999", headers=admin).status_code == 404


def test_holiday_lookup_update_and_upcoming_over_http(client):
    admin = _headers()
    labour = client.post("/api/holidays", json={"name": "Labour Day", "date": "2026-05-01"}, headers=admin).get_json()
    client.post("/api/holidays", json={"name": "Christmas", "date": "2099-12-25"}, headers=admin)

    assert client.get(f"/api/holidays/{labour['id']}", headers=admin).get_json()["name"] == "Labour Day"
    assert client.get("/api/holidays/999", headers=admin).status_code == 404

    resp = client.put(f"/api/holidays/{labour['id']}", json={"name": "May Day"}, headers=admin)
    assert resp.status_code == 200
    assert resp.get_json()["holiday_date"] == "2026-05-01"
    resp = client.put(f"/api/holidays/{labour['id']}", json={"date": "2099-12-25"}, headers=admin)
    assert resp.status_code == 400

    resp = client.get("/api/holidays/upcoming", query_string={"limit": 1}, headers=admin)
    assert [h["name"] for h in resp.get_json()] == ["Christmas"]
    assert client.get("/api/holidays/upcoming", query_string={"limit": 0}, headers=admin).status_code == 400


def test_non_finite_amounts_are_rejected_over_http(client, world):
    world.add_employee()
    admin = _headers()
    payroll = client.post("/api/payroll/process", json={"month": 5, "year": 2026}, headers=admin).get_json()["payrolls"][0]

    resp = client.put(f"/api/payroll/{payroll['id']}", json={"base_salary": "NaN"}, headers=admin)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Base salary must be a number"}
