"""
Tests for the main application endpoints and error handling.
"""


def test_root_endpoint(client):
    """
    Test the root endpoint returns a welcome message.
    """
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_health_check(client):
    """
    Test the health check endpoint reports the service as running.
    """
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["environment"] == "test"
    assert "timestamp" in data


def test_api_index_lists_endpoint_groups(client):
    response = client.get("/api")
    assert response.status_code == 200
    endpoints = response.json()["endpoints"]
    assert set(endpoints) >= {"practitioner", "patients", "therapy", "email"}


def test_unknown_route_returns_404_with_available_endpoints(client):
    response = client.get("/api/does-not-exist/at/all")
    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "Route not found"
    assert "availableEndpoints" in data


def test_malformed_json_returns_400(client):
    response = client.post(
        "/api/practitioner/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON"


def test_responses_carry_request_id(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
    assert "X-Process-Time" in response.headers


def test_apps_do_not_share_state(settings, email_service, registered):
    from fastapi.testclient import TestClient
    from ayursutra.main import create_app

    with TestClient(create_app(settings, email_service=email_service)) as other:
        response = other.post(
            "/api/practitioner/login",
            json={"email": "asha@example.com", "password": "secret123"},
        )
    assert response.status_code == 401


def test_incoming_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "trace-42"})
    assert response.headers["X-Request-ID"] == "trace-42"
