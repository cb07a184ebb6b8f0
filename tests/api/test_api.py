from __future__ import annotations

import io

import pytest
from werkzeug.security import generate_password_hash

from src.hr_portal.hr_portal.container import build_services
from src.hr_portal.hr_portal.core.enums import Role
from src.hr_portal.hr_portal.main import create_app

from tests.fakes import (
    InMemoryAssets,
    InMemoryAttendance,
    InMemoryDepartments,
    InMemoryEmployees,
    InMemoryLeaveBalances,
    InMemoryLeaves,
    InMemoryPayslips,
    InMemoryPolls,
    InMemoryResignations,
    make_employee,
)

PASSWORD = "secret1"


@pytest.fixture
def client(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENV", "testing")
    hashed = generate_password_hash(PASSWORD)
    employees = InMemoryEmployees(
        [
            make_employee(1, level=4, role=Role.ADMIN, password_hash=hashed),
            make_employee(2, level=1, manager_id=1, password_hash=hashed),
            make_employee(3, level=0, manager_id=2, password_hash=hashed),
            make_employee(4, level=0, manager_id=2, password_hash=hashed, is_active=False),
        ]
    )
    container = build_services(
        employees_repo=employees,
        departments_repo=InMemoryDepartments(),
        leaves_repo=InMemoryLeaves(),
        leave_balances_repo=InMemoryLeaveBalances(),
        attendance_repo=InMemoryAttendance(),
        polls_repo=InMemoryPolls(),
        assets_repo=InMemoryAssets(),
        resignations_repo=InMemoryResignations(),
        payslips_repo=InMemoryPayslips(),
        payslip_storage_dir=tmp_path,
        secret_key="test-secret",
    )
    app = create_app(container=container)
    return app.test_client()


def _login(client, identifier):
    res = client.post("/api/auth/login", json={"email": identifier, "password": PASSWORD})
    assert res.status_code == 200, res.get_json()
    return {"Authorization": f"Bearer {res.get_json()['data']['token']}"}


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json()["data"] == {"status": "ok"}


def test_requests_without_token_are_rejected(client):
    res = client.get("/api/polls")
    assert res.status_code == 401
    assert res.get_json()["success"] is False

    res = client.get("/api/polls", headers={"Authorization": "Bearer nonsense"})
    assert res.status_code == 401


def test_login_by_email_or_code(client):
    res = client.post("/api/auth/login", json={"email": "e1@example.com", "password": PASSWORD})
    body = res.get_json()
    assert res.status_code == 200
    assert body["canViewSensitiveData"] is True
    assert "password_hash" not in body["data"]["employee"]

    headers = _login(client, "EMP003")
    me = client.get("/api/auth/me", headers=headers).get_json()
    assert me["data"]["employee_id"] == 3
    assert me["canViewSensitiveData"] is False


def test_login_failures(client):
    res = client.post("/api/auth/login", json={"email": "e3@example.com", "password": "wrong"})
    assert res.status_code == 401
    res = client.post("/api/auth/login", json={"email": "e4@example.com", "password": PASSWORD})
    assert res.status_code == 401
    res = client.post("/api/auth/login", json={})
    assert res.status_code == 400


def test_domain_errors_map_to_status_codes(client):
    staff = _login(client, "e3@example.com")

    res = client.post("/api/polls", json={"title": "Lunch", "options": ["A", "B"]}, headers=staff)
    assert res.status_code == 403
    res = client.get("/api/polls/999", headers=staff)
    assert res.status_code == 404
    res = client.post("/api/leaves", json={"leave_type": "casual"}, headers=staff)
    assert res.status_code == 400
    assert res.get_json()["message"]


def test_poll_vote_flow(client):
    owner = _login(client, "e1@example.com")
    staff = _login(client, "e3@example.com")

    created = client.post("/api/polls", json={"title": "Lunch", "options": ["Pizza", "Sushi"]}, headers=owner)
    assert created.status_code == 201
    poll = created.get_json()["data"]

    voted = client.post(
        f"/api/polls/{poll['poll_id']}/vote",
        json={"option_id": poll["options"][0]["option_id"]},
        headers=staff,
    ).get_json()["data"]
    assert voted["canSeeResults"] is False
    assert voted["totalVotes"] is None

    results = client.get(f"/api/polls/{poll['poll_id']}", headers=owner).get_json()["data"]
    assert results["totalVotes"] == 1
    assert results["options"][0]["percentage"] == 100
    assert len(results["votes"]) == 1


def test_leave_approval_over_http(client):
    staff = _login(client, "e3@example.com")
    manager = _login(client, "e2@example.com")

    leave = client.post(
        "/api/leaves",
        json={"leave_type": "unpaid", "start_date": "2024-03-18", "end_date": "2024-03-18", "reason": "Flu"},
        headers=staff,
    ).get_json()["data"]

    res = client.put(f"/api/leaves/{leave['leave_id']}/decision", json={"status": "approved"}, headers=staff)
    assert res.status_code == 403

    res = client.put(f"/api/leaves/{leave['leave_id']}/decision", json={"status": "approved"}, headers=manager)
    assert res.status_code == 200
    assert res.get_json()["message"] == "Leave approved"


def test_team_overview_requires_manager(client):
    assert client.get("/api/team/overview", headers=_login(client, "e3@example.com")).status_code == 403
    res = client.get("/api/team/overview", headers=_login(client, "e2@example.com"))
    assert res.status_code == 200
    assert res.get_json()["data"]["stats"]["teamSize"] == 1


def test_leave_balance_endpoints(client):
    staff = _login(client, "e3@example.com")
    owner = _login(client, "e1@example.com")

    mine = client.get("/api/leaves/balance", headers=staff).get_json()["data"]
    assert (mine["personal"], mine["sick"], mine["casual"]) == (1.0, 0.5, 0.5)

    assert client.put("/api/leaves/balance/3", json={"personal": 4}, headers=staff).status_code == 403
    res = client.put("/api/leaves/balance/3", json={"personal": 4}, headers=owner)
    assert res.status_code == 200
    assert res.get_json()["data"]["personal"] == 4.0


def test_payslip_upload_list_and_download(client):
    owner = _login(client, "e1@example.com")
    staff = _login(client, "e3@example.com")
    manager = _login(client, "e2@example.com")

    res = client.post(
        "/api/payslips",
        data={"employee_id": "3", "month": "2", "year": "2024", "payslip": (io.BytesIO(b"%PDF-1.4 feb"), "feb.pdf")},
        content_type="multipart/form-data",
        headers=owner,
    )
    assert res.status_code == 200, res.get_json()
    payslip = res.get_json()["data"]
    assert "file_path" not in payslip

    res = client.post(
        "/api/payslips",
        data={"employee_id": "3", "month": "2", "year": "2024", "payslip": (io.BytesIO(b"%PDF-1.4"), "x.pdf")},
        content_type="multipart/form-data",
        headers=staff,
    )
    assert res.status_code == 403

    listed = client.get("/api/payslips", headers=staff).get_json()
    assert listed["count"] == 1
    assert client.get("/api/payslips", headers=manager).get_json()["count"] == 0

    res = client.get(f"/api/payslips/{payslip['payslip_id']}/download", headers=staff)
    assert res.status_code == 200
    assert res.mimetype == "application/pdf"
    assert res.headers["Content-Disposition"].startswith("inline")
    assert res.data == b"%PDF-1.4 feb"
    res.close()

    assert client.get(f"/api/payslips/{payslip['payslip_id']}/download", headers=manager).status_code == 403
