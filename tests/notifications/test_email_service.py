"""
Tests for building and sending transactional emails.
"""
from datetime import datetime, timezone

import pytest

from ayursutra.notifications import templates
from ayursutra.notifications.service import EmailService, deliver
from ayursutra.notifications.transport import SMTPTransport, TransportNotConfigured


def test_send_records_message(email_service, mailbox):
    result = email_service.send("ravi@example.com", "Hello", "<p>Hi</p>")
    assert result.success is True
    assert result.message_id
    message = mailbox.messages[0]
    assert message["From"] == "clinic@example.com"
    assert message["Message-ID"] == result.message_id


def test_send_never_raises(email_service, mailbox):
    mailbox.fail = True
    result = email_service.send("ravi@example.com", "Hello", "<p>Hi</p>")
    assert result.success is False
    assert "SMTP server unavailable" in result.error


def test_send_without_credentials_fails_softly(settings):
    settings = settings.model_copy(update={"mail_username": None, "mail_password": None})
    result = EmailService(settings).send_test_email("ravi@example.com")
    assert result.success is False


def test_unconfigured_transport_raises(settings):
    settings = settings.model_copy(update={"mail_username": None})
    with pytest.raises(TransportNotConfigured):
        SMTPTransport(settings).send_message(None)


def test_reset_url_points_at_frontend(email_service):
    assert email_service.build_reset_url("abc") == "http://frontend.test/reset-password?token=abc"


def test_reset_email_mentions_expiry(email_service, mailbox):
    email_service.send_password_reset_email("asha@example.com", "abc")
    html = mailbox.messages[0].get_body(preferencelist=("html",)).get_content()
    assert "http://frontend.test/reset-password?token=abc" in html
    assert "60 minutes" in html


def test_templates_escape_user_input():
    html = templates.welcome_email("<script>x</script>", "a@example.com")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_appointment_reminder_formats_date():
    html = templates.appointment_reminder_email(
        "Ravi", "Abhyanga", datetime(2024, 5, 1, tzinfo=timezone.utc), "", "scheduled"
    )
    assert "May 01, 2024" in html
    assert "To be confirmed" in html


def test_deliver_returns_failure(email_service, mailbox):
    mailbox.fail = True
    result = deliver("welcome email", email_service.send_welcome_email, "Asha", "asha@example.com")
    assert result.success is False
