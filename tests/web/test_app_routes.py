from __future__ import annotations

import io

import pytest

from src.dayflow.dayflow.main import create_app


@pytest.fixture
def app(tmp_path):
    return create_app(
        "config.testing",
        DATA_DIR=str(tmp_path / "data"),
        UPLOAD_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password):
    return client.post("/login", data={"email": email, "password": password})


def _signup(client, employee_id="EMP010", email="jane@dayflow.com"):
    return client.post(
        "/signup",
        data={"employeeId": employee_id, "email": email, "password": "secret1", "name": "Jane Doe"},
    )


def test_first_start_seeds_admin(client):
    resp = _login(client, "admin@dayflow.com", "admin123")

    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"


def test_protected_routes_require_login(client):
    assert client.get("/dashboard").status_code == 401
    assert client.post("/attendance/checkin").status_code == 401
    assert client.get("/").status_code == 302


def test_signup_conflict_and_bad_login(client):
    assert _signup(client).status_code == 201

    resp = _signup(client, employee_id="EMP011")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "duplicate_identity"

    resp = _login(client, "jane@dayflow.com", "nope")
    assert resp.status_code == 401


def test_attendance_flow(client):
    _signup(client)
    _login(client, "jane@dayflow.com", "secret1")

    resp = client.post("/attendance/checkin")
    assert resp.status_code == 200
    assert resp.get_json()["record"]["checkOut"] is None

    resp = client.post("/attendance/checkin")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "already_checked_in"

    assert client.get("/profile").get_json()["profile"]["status"] == "present"

    resp = client.post("/attendance/checkout")
    assert resp.status_code == 200
    assert resp.get_json()["record"]["checkOut"] is not None

    resp = client.post("/attendance/checkout")
    assert resp.get_json()["error"] == "already_checked_out"

    body = client.get("/dashboard").get_json()
    assert body["view"] == "employee"
    assert body["profile"]["status"] == "absent"
    assert "passwordHash" not in body["profile"]
    assert len(body["recentAttendance"]) == 1


def test_leave_flow_and_admin_gate(client):
    _signup(client)
    _login(client, "jane@dayflow.com", "secret1")
    resp = client.post(
        "/leaves/apply",
        data={"leaveType": "Sick", "startDate": "2024-06-03", "endDate": "2024-06-04", "remarks": "flu"},
    )
    assert resp.status_code == 201
    leave_id = resp.get_json()["leave"]["id"]

    assert client.post(f"/leaves/approve/{leave_id}").status_code == 403
    assert client.get("/employees").status_code == 403

    client.get("/logout")
    _login(client, "admin@dayflow.com", "admin123")

    assert client.get("/dashboard").get_json()["pendingLeaves"] == 1

    resp = client.post(f"/leaves/approve/{leave_id}")
    assert resp.get_json()["leave"]["status"] == "approved"

    resp = client.post(f"/leaves/reject/{leave_id}")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "already_decided"

    assert client.post("/leaves/approve/999").status_code == 404


def test_admin_manages_employees(client):
    _login(client, "admin@dayflow.com", "admin123")

    resp = client.post(
        "/employees/add",
        data={"employeeId": "EMP020", "email": "kim@dayflow.com", "password": "secret1", "name": "Kim", "salary": "48000"},
    )
    assert resp.status_code == 201

    resp = client.post("/employees/EMP020/update", data={"position": "Analyst", "status": "present"})
    assert resp.get_json()["employee"]["position"] == "Analyst"
    assert resp.get_json()["employee"]["status"] == "absent"

    detail = client.get("/employees/EMP020").get_json()
    assert detail["employee"]["salary"] == 48000.0
    assert detail["attendance"] == []

    assert client.get("/employees/EMP404").status_code == 404
    ids = [e["id"] for e in client.get("/employees").get_json()["employees"]]
    assert ids == ["EMP001", "EMP020"]


def test_profile_picture_upload(client, app):
    _signup(client)
    _login(client, "jane@dayflow.com", "secret1")

    resp = client.post(
        "/profile/update",
        data={"phone": "555-0101", "profilePicture": (io.BytesIO(b"\x89PNG fake"), "me.png")},
        content_type="multipart/form-data",
    )

    profile = resp.get_json()["profile"]
    assert profile["phone"] == "555-0101"
    assert profile["profilePicturePath"].startswith("/uploads/profiles/")
    assert profile["profilePicturePath"].endswith("-me.png")
    assert client.get(profile["profilePicturePath"]).data == b"\x89PNG fake"
