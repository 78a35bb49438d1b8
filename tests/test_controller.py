from types import SimpleNamespace

import pytest
from flask import Flask

from src.biometric_attendance.biometric_attendance.reconciliation.controller import register as register_attendance
from src.biometric_attendance.biometric_attendance.settings.controller import register as register_settings


@pytest.fixture
def client(scan_service, settings_service):
    app = Flask(__name__)
    app.config["TESTING"] = True
    container = SimpleNamespace(scan_service=scan_service, settings_service=settings_service)
    register_attendance(app, container)
    register_settings(app, container)
    return app.test_client()


def test_post_scan_returns_attendance(client):
    res = client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:05:00"})

    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["biometric_log"]["window"] == "TimeIn"
    assert body["attendance"]["time_in"] == "08:05:00"
    assert body["attendance"]["remarks"] == "Missing Time Out"
    assert body["warning"] is None


def test_post_scan_for_unknown_employee_warns(client):
    res = client.post("/api/biometric-logs", json={"employee_code": "EMP404", "timestamp": "2025-01-02T08:05:00"})

    assert res.status_code == 201
    body = res.get_json()
    assert body["attendance"] is None
    assert "EMP404" in body["warning"]


@pytest.mark.parametrize(
    "payload",
    [
        {"employee_code": "EMP001"},
        {"employee_code": "bad code!", "timestamp": "2025-01-02T08:05:00"},
        {"timestamp": "2025-01-02T08:05:00"},
        {"employee_code": "EMP001", "timestamp": "02/01/2025 8am"},
        {"employee_code": "EMP001", "timestamp": "2025-01-02T08:05:00+07:00"},
    ],
)
def test_post_scan_validation(client, payload):
    res = client.post("/api/biometric-logs", json=payload)

    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_delete_scan_updates_attendance(client):
    first = client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:05:00"})
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:20:00"})
    scan_id = first.get_json()["biometric_log"]["id"]

    res = client.delete(f"/api/biometric-logs/{scan_id}")

    assert res.status_code == 200
    assert res.get_json()["attendance"]["time_in"] == "08:20:00"


def test_delete_missing_scan_is_404(client):
    assert client.delete("/api/biometric-logs/999").status_code == 404


def test_sync_endpoint_reports_counts(client):
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:05:00"})

    res = client.post("/api/attendance/sync")

    assert res.status_code == 200
    body = res.get_json()
    assert body["success"] is True
    assert (body["created"], body["updated"], body["deleted"]) == (0, 0, 0)


def test_get_attendance(client):
    assert client.get("/api/attendance/1/2025-01-02").status_code == 404

    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T17:00:00"})
    res = client.get("/api/attendance/1/2025-01-02")

    assert res.status_code == 200
    assert res.get_json()["attendance"]["remarks"] == "Missing Time In"


def test_get_attendance_bad_date(client):
    assert client.get("/api/attendance/1/2025-13-40").status_code == 400


def test_get_attendance_includes_periods(client):
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T07:55:00"})
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T17:00:00"})

    body = client.get("/api/attendance/1/2025-01-02").get_json()

    assert body["periods"]["morning_time_in"] == "07:55:00"
    assert body["periods"]["morning_time_out"] == "12:00:00"
    assert body["periods"]["overtime_time_in"] is None


def test_overtime_toggle_endpoint(client):
    client.put("/api/attendance-settings", json={"required_time_in": "08:00", "required_time_out": "17:00"})
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:00:00"})
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T18:00:00"})

    res = client.put("/api/attendance/1/2025-01-02/overtime", json={"is_overtime": True})

    assert res.status_code == 200
    att = res.get_json()["attendance"]
    assert att["is_overtime"] is True
    assert att["overtime_hours"] == "1.00"

    assert client.put("/api/attendance/1/2025-01-02/overtime", json={}).status_code == 400
    assert client.put("/api/attendance/2/2025-01-02/overtime", json={"is_overtime": True}).status_code == 404


def test_bulk_overtime_endpoint(client):
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:00:00"})

    res = client.put("/api/attendance/overtime", json={"employee_ids": [1, 2], "date": "2025-01-02", "is_overtime": True})

    assert res.status_code == 200
    assert res.get_json()["updated_count"] == 1

    res = client.put("/api/attendance/overtime", json={"employee_ids": [1], "date": "2025-01-02"})
    assert res.status_code == 400


def test_put_attendance_manual_times(client):
    res = client.put("/api/attendance/1/2025-01-02", json={"time_in": "07:55", "time_out": "17:00"})

    assert res.status_code == 200
    att = res.get_json()["attendance"]
    assert att["status"] == "Present"
    assert att["total_hours"] == "9.00"

    res = client.put("/api/attendance/1/2025-01-02", json={"time_out": None})
    assert res.get_json()["attendance"]["time_out"] is None


def test_put_attendance_rejects_inverted_times(client):
    res = client.put("/api/attendance/1/2025-01-02", json={"time_in": "18:00", "time_out": "08:00"})

    assert res.status_code == 400


def test_put_attendance_unknown_employee(client):
    res = client.put("/api/attendance/77/2025-01-02", json={"time_in": "08:00"})

    assert res.status_code == 404


def test_override_roundtrip(client):
    client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:00:00"})

    res = client.post("/api/attendance/1/2025-01-02/override", json={"status": "Absent", "remarks": "Sent home"})
    assert res.status_code == 200
    assert res.get_json()["attendance"]["status"] == "Absent"

    res = client.delete("/api/attendance/1/2025-01-02/override")
    assert res.status_code == 200
    assert res.get_json()["attendance"]["status"] == "Incomplete"


def test_override_requires_override_status(client):
    res = client.post("/api/attendance/1/2025-01-02/override", json={"status": "Present"})

    assert res.status_code == 400


def test_settings_get_and_put(client):
    res = client.get("/api/attendance-settings")
    assert res.get_json()["settings"]["required_time_in"] == "08:00:00"

    res = client.put(
        "/api/attendance-settings",
        json={"required_time_in": "09:00", "required_time_out": "18:00", "break_duration_minutes": 60, "break_is_counted": False},
    )
    assert res.status_code == 200
    assert res.get_json()["settings"]["required_time_out"] == "18:00:00"
    assert res.get_json()["recompute"] == {"changed": 0, "errors": []}
    assert client.get("/api/attendance-settings").get_json()["settings"]["break_duration_minutes"] == 60


def test_settings_put_validation(client):
    res = client.put("/api/attendance-settings", json={"required_time_in": "18:00", "required_time_out": "09:00"})

    assert res.status_code == 400


def test_conflict_maps_to_409(client, store):
    store.pending_conflicts = 10

    res = client.post("/api/biometric-logs", json={"employee_code": "EMP001", "timestamp": "2025-01-02T08:05:00"})

    assert res.status_code == 409


def test_unexpected_error_maps_to_500(client, scan_service, monkeypatch):
    def explode():
        raise RuntimeError("db exploded")

    monkeypatch.setattr(scan_service, "sync_all", explode)

    res = client.post("/api/attendance/sync")

    assert res.status_code == 500
    assert res.get_json()["message"] == "Internal error"
