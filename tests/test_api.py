from __future__ import annotations

from datetime import date, timedelta

import pytest


def _login_as(client, user_id: int) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id


def _future(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def test_requires_session(client):
    resp = client.get("/me")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthenticated"


def test_signup_then_login_then_logout(client):
    resp = client.post(
        "/auth/signup",
        json={
            "email": "hire@example.com",
            "password": "secret1",
            "employee_id": "EMP777",
            "first_name": "New",
            "last_name": "Hire",
        },
    )
    assert resp.status_code == 201
    assert resp.get_json()["profile"]["role"] == "employee"

    client.post("/auth/logout")
    assert client.get("/me").status_code == 401

    bad = client.post("/auth/login", json={"email": "hire@example.com", "password": "wrong!!"})
    assert bad.status_code == 401

    ok = client.post("/auth/login", json={"email": "hire@example.com", "password": "secret1", "remember_me": True})
    assert ok.status_code == 200
    me = client.get("/me").get_json()
    assert me["profile"]["employee_id"] == "EMP777"
    assert me["is_admin"] is False


def test_signup_validation_lists_fields(client):
    resp = client.post("/auth/signup", json={"email": "x", "password": "1"})

    assert resp.status_code == 400
    assert {"email", "password"} <= set(resp.get_json()["fields"])


def test_leave_request_lifecycle(client):
    _login_as(client, 1)
    created = client.post(
        "/leave-requests",
        json={"leave_type": "paid", "start_date": _future(10), "end_date": _future(12), "remarks": "trip"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["leave_request"]["id"]
    assert created.get_json()["leave_request"]["status"] == "pending"

    forbidden = client.post(f"/leave-requests/{request_id}/review", json={"decision": "approve"})
    assert forbidden.status_code == 403

    _login_as(client, 2)
    approved = client.post(
        f"/leave-requests/{request_id}/review", json={"decision": "approve", "comment": "enjoy"}
    )
    assert approved.status_code == 200
    body = approved.get_json()["leave_request"]
    assert body["status"] == "approved"
    assert body["reviewed_by"] == 2

    again = client.post(f"/leave-requests/{request_id}/review", json={"decision": "reject"})
    assert again.status_code == 409


def test_leave_request_in_the_past_is_rejected(client):
    _login_as(client, 1)
    resp = client.post(
        "/leave-requests",
        json={"leave_type": "sick", "start_date": _future(-3), "end_date": _future(-2)},
    )

    assert resp.status_code == 400
    assert "start_date" in resp.get_json()["fields"]


def test_leave_list_is_scoped(client, leaves):
    leaves.create(user_id=3, leave_type="paid", start_date=date(2030, 1, 1), end_date=date(2030, 1, 2), remarks=None)
    _login_as(client, 1)

    assert client.get("/leave-requests").get_json()["leave_requests"] == []
    assert client.get("/leave-requests/1").status_code == 403
    assert client.get("/leave-requests?status=maybe").status_code == 400


def test_check_in_twice(client):
    _login_as(client, 1)

    assert client.post("/attendance/check-in").status_code == 201
    assert client.post("/attendance/check-in").status_code == 409
    today = client.get("/attendance/today").get_json()["record"]
    assert today["check_out"] == "-"
    assert today["duration"] == "-"


def test_check_out_without_check_in(client):
    _login_as(client, 1)

    assert client.post("/attendance/check-out").status_code == 404


@pytest.mark.parametrize("range_", ["week", "month", "all"])
def test_attendance_ranges(client, range_):
    _login_as(client, 1)

    resp = client.get(f"/attendance?range={range_}")

    assert resp.status_code == 200
    assert resp.get_json()["records"] == []


def test_payroll_not_configured(client):
    _login_as(client, 1)

    body = client.get("/payroll").get_json()

    assert body["payroll"] is None
    assert body["message"] == "No payroll configured"


def test_payroll_admin_write_and_employee_read(client):
    _login_as(client, 1)
    denied = client.put("/payroll/1", json={"basic_salary": "3000"})
    assert denied.status_code == 403

    _login_as(client, 2)
    saved = client.put(
        "/payroll/1",
        json={"basic_salary": "3000", "housing_allowance": "500", "transport_allowance": "200",
              "tax_deduction": "300", "other_deductions": "50"},
    )
    assert saved.status_code == 200
    assert saved.get_json()["payroll"]["net_salary"] == "3350.00"

    rejected = client.put("/payroll/1", json={"net_salary": "1"})
    assert rejected.status_code == 400

    _login_as(client, 3)
    assert client.get("/payroll/1").status_code == 403

    _login_as(client, 1)
    mine = client.get("/payroll").get_json()
    assert mine["summary"]["total_earnings"] == "3700.00"


def test_employee_cannot_raise_own_role(client):
    _login_as(client, 1)

    assert client.patch("/profiles/1", json={"phone": "0900"}).status_code == 200
    assert client.patch("/profiles/1", json={"role": "admin"}).status_code == 403
    assert client.patch("/profiles/3", json={"phone": "0900"}).status_code == 403


def test_dashboard(client):
    _login_as(client, 2)

    body = client.get("/dashboard").get_json()

    assert body["summary"]["admin"]["total_employees"] == 3


def test_non_text_remarks_are_a_field_error(client, leaves):
    _login_as(client, 1)

    resp = client.post(
        "/leave-requests",
        json={"leave_type": "paid", "start_date": _future(5), "end_date": _future(6), "remarks": 5},
    )

    assert resp.status_code == 400
    assert "remarks" in resp.get_json()["fields"]
    assert leaves.count() == 0


def test_empty_profile_patch_returns_profile(client):
    _login_as(client, 1)

    resp = client.patch("/profiles/1", json={})

    assert resp.status_code == 200
    assert resp.get_json()["profile"]["id"] == 1


def test_huge_payroll_amount_is_a_field_error(client):
    _login_as(client, 2)

    resp = client.put("/payroll/1", json={"basic_salary": "1e30"})

    assert resp.status_code == 400
    assert "basic_salary" in resp.get_json()["fields"]


def test_signup_after_employee_id_clash_can_be_retried(client):
    body = {"email": "late@example.com", "password": "secret1", "first_name": "Lee", "last_name": "Ta"}

    clash = client.post("/auth/signup", json={**body, "employee_id": "EMP001"})
    assert clash.status_code == 409

    retry = client.post("/auth/signup", json={**body, "employee_id": "EMP808"})
    assert retry.status_code == 201
