"""
Tests for the explicit email endpoints.
"""
import pytest

from ayursutra.auth.service import PASSWORD_RESET_MESSAGE


@pytest.fixture
def patient(client):
    response = client.post(
        "/api/patients",
        json={"practitionerId": "practitioner-1", "name": "Ravi Kumar", "email": "ravi@example.com"},
    )
    return response.json()["patient"]


@pytest.fixture
def schedule(client, patient):
    response = client.post(
        "/api/therapy",
        json={
            "patientId": patient["id"],
            "practitionerId": "practitioner-1",
            "therapyName": "Shirodhara",
            "scheduledDate": "2024-05-01T10:00:00Z",
        },
    )
    return response.json()["schedule"]


def test_test_email_sends(client, mailbox):
    response = client.post("/api/email/test", json={"to": "ops@example.com"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["messageId"] == mailbox.to("ops@example.com")[0]["Message-ID"]


def test_test_email_requires_address(client):
    response = client.post("/api/email/test", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Email address is required"


def test_test_email_reports_failure(client, mailbox):
    mailbox.fail = True
    response = client.post("/api/email/test", json={"to": "ops@example.com"})
    assert response.status_code == 500
    assert response.json()["error"] == "Email sending failed"


def test_welcome_email_for_registered_practitioner(client, registered, mailbox):
    mailbox.messages.clear()
    response = client.post(
        "/api/email/welcome", json={"practitionerId": registered["practitioner"]["id"]}
    )
    assert response.status_code == 200
    assert len(mailbox.to("asha@example.com")) == 1


def test_welcome_email_for_unknown_practitioner(client):
    response = client.post("/api/email/welcome", json={"practitionerId": "nobody"})
    assert response.status_code == 404


def test_appointment_reminder(client, patient, schedule, mailbox):
    response = client.post(
        "/api/email/appointment-reminder",
        json={"patientId": patient["id"], "appointmentId": schedule["id"]},
    )
    assert response.status_code == 200
    html = mailbox.to("ravi@example.com")[0].get_body(preferencelist=("html",)).get_content()
    assert "Shirodhara" in html


def test_appointment_reminder_unknown_schedule(client, patient):
    response = client.post(
        "/api/email/appointment-reminder",
        json={"patientId": patient["id"], "appointmentId": "missing"},
    )
    assert response.status_code == 404


def test_therapy_completion_requires_ids(client):
    response = client.post("/api/email/therapy-completion", json={"patientId": "x"})
    assert response.status_code == 400


def test_therapy_completion(client, patient, schedule, mailbox):
    response = client.post(
        "/api/email/therapy-completion",
        json={"patientId": patient["id"], "therapyId": schedule["id"]},
    )
    assert response.status_code == 200
    assert mailbox.to("ravi@example.com")[0]["Subject"] == "Therapy Session Completed - AyurSutra"


def test_password_reset_response_is_the_same_for_any_email(client, registered, mailbox):
    mailbox.messages.clear()
    known = client.post("/api/email/password-reset", json={"email": "asha@example.com"})
    unknown = client.post("/api/email/password-reset", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert known.json()["message"] == PASSWORD_RESET_MESSAGE
    assert len(mailbox.messages) == 1


def test_password_reset_requires_email(client):
    response = client.post("/api/email/password-reset", json={})
    assert response.status_code == 400
