"""
Tests for the patient endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest

from ayursutra.patients.models import Patient

PRACTITIONER_ID = "practitioner-1"


def _timestamp(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def patient(client):
    response = client.post(
        "/api/patients",
        json={
            "practitionerId": PRACTITIONER_ID,
            "name": "Ravi Kumar",
            "email": "ravi@example.com",
            "phone": "555-0100",
            "primaryDosha": "Vata",
            "healthNotes": "Lower back stiffness",
        },
    )
    assert response.status_code == 201
    return response.json()["patient"]


def test_create_patient(patient):
    assert patient["id"]
    assert patient["practitionerId"] == PRACTITIONER_ID
    assert patient["primaryDosha"] == "Vata"
    assert patient["createdAt"]


def test_create_patient_defaults_optional_fields(client):
    response = client.post("/api/patients", json={"practitionerId": PRACTITIONER_ID, "name": "Meera"})
    assert response.status_code == 201
    data = response.json()["patient"]
    assert data["email"] == ""
    assert data["healthNotes"] == ""


def test_create_patient_requires_name(client):
    response = client.post("/api/patients", json={"practitionerId": PRACTITIONER_ID})
    assert response.status_code == 400
    assert response.json()["message"] == "Practitioner ID and name are required"


def test_get_single_patient(client, patient):
    response = client.get(f"/api/patients/single/{patient['id']}")
    assert response.status_code == 200
    assert response.json()["patient"]["name"] == "Ravi Kumar"


def test_get_missing_patient(client):
    response = client.get("/api/patients/single/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found", "message": "Patient not found"}


def test_list_patients_newest_first(client, db):
    now = datetime.now(timezone.utc)
    for offset, name in enumerate(["Oldest", "Middle", "Newest"]):
        created = now + timedelta(minutes=offset)
        db.add(Patient(practitioner_id=PRACTITIONER_ID, name=name, created_at=created, updated_at=created))
    db.add(Patient(practitioner_id="someone-else", name="Not Mine"))
    db.commit()

    response = client.get(f"/api/patients/{PRACTITIONER_ID}")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    assert [p["name"] for p in data["patients"]] == ["Newest", "Middle", "Oldest"]


def test_list_patients_empty(client):
    response = client.get("/api/patients/nobody")
    assert response.status_code == 200
    assert response.json() == {"success": True, "patients": [], "count": 0}


def test_search_patients_by_name_and_email(client, patient):
    client.post("/api/patients", json={"practitionerId": PRACTITIONER_ID, "name": "Meera"})

    by_name = client.get(f"/api/patients/search/{PRACTITIONER_ID}", params={"q": "RAVI"})
    assert [p["name"] for p in by_name.json()["patients"]] == ["Ravi Kumar"]

    by_email = client.get(f"/api/patients/search/{PRACTITIONER_ID}", params={"q": "example.com"})
    assert by_email.json()["count"] == 1

    other_practitioner = client.get("/api/patients/search/someone-else", params={"q": "Ravi"})
    assert other_practitioner.json()["count"] == 0


def test_search_requires_query(client):
    response = client.get(f"/api/patients/search/{PRACTITIONER_ID}")
    assert response.status_code == 400
    assert response.json()["message"] == "Search query is required"


def test_partial_update_keeps_other_fields(client, patient):
    before = _timestamp(patient["updatedAt"])
    response = client.put(f"/api/patients/{patient['id']}", json={"phone": "555-0199"})
    assert response.status_code == 200
    updated = response.json()["patient"]
    assert updated["phone"] == "555-0199"
    assert updated["name"] == patient["name"]
    assert updated["healthNotes"] == patient["healthNotes"]
    assert _timestamp(updated["updatedAt"]) > before
    assert updated["createdAt"] == patient["createdAt"]


def test_update_rejects_empty_name(client, patient):
    response = client.put(f"/api/patients/{patient['id']}", json={"name": ""})
    assert response.status_code == 400


def test_update_missing_patient(client):
    response = client.put("/api/patients/does-not-exist", json={"phone": "1"})
    assert response.status_code == 404


def test_delete_patient(client, patient):
    response = client.delete(f"/api/patients/{patient['id']}")
    assert response.status_code == 200
    assert response.json()["deletedCount"] == 1
    assert client.get(f"/api/patients/single/{patient['id']}").status_code == 404


def test_delete_missing_patient(client):
    response = client.delete("/api/patients/does-not-exist")
    assert response.status_code == 404


def test_timestamps_carry_utc_offset(patient):
    assert patient["createdAt"].endswith(("Z", "+00:00"))
    assert _timestamp(patient["createdAt"]).utcoffset() == timedelta(0)


def test_search_treats_wildcards_literally(client, patient):
    client.post("/api/patients", json={"practitionerId": PRACTITIONER_ID, "name": "Anu_100%"})

    underscore = client.get(f"/api/patients/search/{PRACTITIONER_ID}", params={"q": "_"})
    assert [p["name"] for p in underscore.json()["patients"]] == ["Anu_100%"]

    percent = client.get(f"/api/patients/search/{PRACTITIONER_ID}", params={"q": "%"})
    assert percent.json()["count"] == 1
