"""
Test configuration for the AyurSutra backend.
"""
import os
import smtplib

# Settings are read from the environment when ayursutra.main is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from ayursutra.config import Settings
from ayursutra.main import create_app
from ayursutra.notifications.service import EmailService


class FakeTransport:
    """
    Records outgoing messages instead of talking to an SMTP server.
    """
    def __init__(self):
        self.messages = []
        self.fail = False

    def send_message(self, message):
        if self.fail:
            raise smtplib.SMTPException("SMTP server unavailable")
        self.messages.append(message)

    def to(self, address):
        return [message for message in self.messages if message["To"] == address]


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret-key",
        mail_username="clinic@example.com",
        mail_password="app-password",
        frontend_url="http://frontend.test",
        environment="test",
    )


@pytest.fixture
def mailbox():
    return FakeTransport()


@pytest.fixture
def email_service(settings, mailbox):
    return EmailService(settings, transport=mailbox)


@pytest.fixture
def app(settings, email_service):
    """
    Create a fresh application, with its own in-memory database, per test.
    """
    return create_app(settings, email_service=email_service)


@pytest.fixture
def client(app):
    """
    Create a test client; entering it runs startup and creates the tables.
    """
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db(client, app):
    """
    Session on the same database the client talks to.
    """
    session = app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def registered(client):
    """
    Register a practitioner and return the response body.
    """
    response = client.post(
        "/api/practitioner/register",
        json={
            "name": "Dr. Asha Rao",
            "email": "asha@example.com",
            "password": "secret123",
            "clinicName": "Sutra Wellness",
        },
    )
    assert response.status_code == 201
    return response.json()
