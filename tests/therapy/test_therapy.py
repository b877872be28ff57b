"""
Tests for the therapy schedule endpoints and service helpers.
"""
from datetime import datetime, timezone

import pytest
from fastapi import BackgroundTasks
from sqlalchemy.exc import OperationalError

from ayursutra.exceptions import ValidationException
from ayursutra.therapy import service
from ayursutra.therapy.models import TherapySchedule

PRACTITIONER_ID = "practitioner-1"


@pytest.fixture
def patient(client):
    response = client.post(
        "/api/patients",
        json={"practitionerId": PRACTITIONER_ID, "name": "Ravi Kumar", "email": "ravi@example.com"},
    )
    return response.json()["patient"]


def _schedule(client, patient, **overrides):
    body = {
        "patientId": patient["id"],
        "practitionerId": PRACTITIONER_ID,
        "therapyName": "Abhyanga",
        "scheduledDate": "2024-05-01T10:00:00Z",
        "scheduledTime": "10:00 AM",
        "precautions": ["Light meal before session"],
    }
    body.update(overrides)
    response = client.post("/api/therapy", json=body)
    assert response.status_code == 201, response.json()
    return response.json()["schedule"]


def test_parse_datetime_accepts_zulu_and_dates():
    assert service.parse_datetime("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert service.parse_datetime("2024-05-01") == datetime(2024, 5, 1, tzinfo=timezone.utc)


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValidationException):
        service.parse_datetime("first of may")


def test_create_schedule_defaults(client, patient):
    schedule = _schedule(client, patient)
    assert schedule["status"] == "scheduled"
    assert schedule["feedback"] == ""
    assert schedule["precautions"] == ["Light meal before session"]


def test_create_schedule_requires_fields(client, patient):
    response = client.post("/api/therapy", json={"patientId": patient["id"], "therapyName": "Abhyanga"})
    assert response.status_code == 400
    assert response.json()["message"] == (
        "Patient ID, practitioner ID, therapy name, and scheduled date are required"
    )


def test_create_schedule_rejects_unknown_status(client, patient):
    response = client.post(
        "/api/therapy",
        json={
            "patientId": patient["id"],
            "practitionerId": PRACTITIONER_ID,
            "therapyName": "Abhyanga",
            "scheduledDate": "2024-05-01",
            "status": "postponed",
        },
    )
    assert response.status_code == 400


def test_practitioner_schedules_sorted_and_filtered(client, patient):
    _schedule(client, patient, therapyName="Shirodhara", scheduledDate="2024-05-02T09:00:00Z")
    _schedule(client, patient, therapyName="Abhyanga", scheduledDate="2024-05-01T10:00:00Z")
    _schedule(client, patient, therapyName="Basti", scheduledDate="2024-05-01T23:30:00Z",
              status="cancelled")

    response = client.get(f"/api/therapy/practitioner/{PRACTITIONER_ID}")
    names = [s["therapyName"] for s in response.json()["schedules"]]
    assert names == ["Abhyanga", "Basti", "Shirodhara"]

    on_day = client.get(f"/api/therapy/practitioner/{PRACTITIONER_ID}", params={"date": "2024-05-01"})
    assert [s["therapyName"] for s in on_day.json()["schedules"]] == ["Abhyanga", "Basti"]

    cancelled = client.get(f"/api/therapy/practitioner/{PRACTITIONER_ID}", params={"status": "cancelled"})
    assert cancelled.json()["count"] == 1


def test_practitioner_schedules_rejects_bad_date(client):
    response = client.get(f"/api/therapy/practitioner/{PRACTITIONER_ID}", params={"date": "tomorrow"})
    assert response.status_code == 400


def test_patient_schedules(client, patient):
    _schedule(client, patient)
    response = client.get(f"/api/therapy/patient/{patient['id']}")
    assert response.json()["count"] == 1
    assert client.get("/api/therapy/patient/someone-else").json()["count"] == 0


def test_get_schedule_and_missing(client, patient):
    schedule = _schedule(client, patient)
    assert client.get(f"/api/therapy/{schedule['id']}").json()["schedule"]["id"] == schedule["id"]

    missing = client.get("/api/therapy/does-not-exist")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Therapy schedule not found"


def test_completing_schedule_emails_patient(client, patient, mailbox):
    schedule = _schedule(client, patient)
    mailbox.messages.clear()

    response = client.put(f"/api/therapy/{schedule['id']}", json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["schedule"]["status"] == "completed"
    assert response.json()["schedule"]["therapyName"] == "Abhyanga"
    assert [m["Subject"] for m in mailbox.to("ravi@example.com")] == ["Therapy Session Completed - AyurSutra"]

    # Already completed, no second email
    client.put(f"/api/therapy/{schedule['id']}", json={"status": "completed"})
    assert len(mailbox.to("ravi@example.com")) == 1


def test_completion_email_failure_does_not_fail_update(client, patient, mailbox):
    schedule = _schedule(client, patient)
    mailbox.fail = True
    response = client.put(f"/api/therapy/{schedule['id']}", json={"status": "completed"})
    assert response.status_code == 200


def test_update_rejects_empty_therapy_name(client, patient):
    schedule = _schedule(client, patient)
    response = client.put(f"/api/therapy/{schedule['id']}", json={"therapyName": ""})
    assert response.status_code == 400
    assert response.json()["message"] == "Therapy name cannot be empty"


def test_update_missing_schedule(client):
    response = client.put("/api/therapy/does-not-exist", json={"scheduledTime": "11:00"})
    assert response.status_code == 404


def test_add_feedback(client, patient):
    schedule = _schedule(client, patient)
    response = client.post(f"/api/therapy/feedback/{schedule['id']}", json={"feedback": "Felt relaxed"})
    assert response.status_code == 200
    assert response.json()["schedule"]["feedback"] == "Felt relaxed"

    empty = client.post(f"/api/therapy/feedback/{schedule['id']}", json={"feedback": ""})
    assert empty.status_code == 400


def test_delete_schedule(client, patient):
    schedule = _schedule(client, patient)
    assert client.delete(f"/api/therapy/{schedule['id']}").status_code == 200
    assert client.delete(f"/api/therapy/{schedule['id']}").status_code == 404


def test_stats(client, patient, db):
    today = datetime.now(timezone.utc).replace(hour=12, minute=0, second=0, microsecond=0)
    _schedule(client, patient, scheduledDate=today.isoformat())
    _schedule(client, patient, scheduledDate="2020-01-01", status="completed")
    _schedule(client, patient, scheduledDate="2020-01-02", status="cancelled")

    response = client.get(f"/api/therapy/stats/{PRACTITIONER_ID}")
    assert response.status_code == 200
    assert response.json()["stats"] == {
        "total": 3,
        "scheduled": 1,
        "completed": 1,
        "cancelled": 1,
        "today": 1,
    }


def test_update_refreshes_updated_at(client, patient):
    schedule = _schedule(client, patient)
    before = service.parse_datetime(schedule["updatedAt"])

    response = client.put(f"/api/therapy/{schedule['id']}", json={"scheduledTime": "11:30 AM"})
    updated = response.json()["schedule"]
    assert updated["scheduledTime"] == "11:30 AM"
    assert updated["therapyName"] == schedule["therapyName"]
    assert service.parse_datetime(updated["updatedAt"]) > before
    assert updated["scheduledDate"].endswith(("Z", "+00:00"))


class _BrokenSession:
    def get(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))


def test_completion_notification_survives_patient_lookup_failure(email_service):
    schedule = TherapySchedule(id="s1", patient_id="p1", therapy_name="Abhyanga", status="completed")
    background_tasks = BackgroundTasks()

    queued = service.queue_completion_notification(
        _BrokenSession(), schedule, email_service, background_tasks
    )
    assert queued is False
    assert background_tasks.tasks == []
