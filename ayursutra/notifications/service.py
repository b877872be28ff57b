"""
Email Service - Notification dispatch for transactional email.

send() never raises: delivery failures come back as a SendResult so callers
can log and carry on without aborting the operation that triggered the email.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional
from urllib.parse import urlencode

from ..config import Settings
from . import templates
from .transport import SMTPTransport

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    """Outcome of one send attempt."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailService:
    """
    Builds and sends transactional emails.

    Args:
        settings: Application settings (sender address, frontend URL)
        transport: Object with a send_message(EmailMessage) method,
            defaults to the SMTP transport
    """
    def __init__(self, settings: Settings, transport=None):
        self.settings = settings
        self.transport = transport or SMTPTransport(settings)

    def send(self, to: str, subject: str, html: str, text: str = "") -> SendResult:
        """
        Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body
            text: Optional plain text alternative

        Returns:
            SendResult: success with the message id, or failure with the error
        """
        try:
            message = EmailMessage()
            message["From"] = self.settings.sender_address or ""
            message["To"] = to
            message["Subject"] = subject
            message_id = make_msgid(domain="ayursutra")
            message["Message-ID"] = message_id
            message.set_content(text or "This message requires an HTML capable mail client.")
            message.add_alternative(html, subtype="html")

            self.transport.send_message(message)
        except Exception as e:
            logger.error(f"Email sending failed to {to}: {str(e)}")
            return SendResult(success=False, error=str(e))

        logger.info(f"Email sent successfully to {to}: {message_id}")
        return SendResult(success=True, message_id=message_id)

    def send_welcome_email(self, name: str, email: str, clinic_name: str = "") -> SendResult:
        return self.send(
            email,
            "Welcome to AyurSutra - Panchakarma Management System",
            templates.welcome_email(name, email, clinic_name),
        )

    def send_appointment_reminder(self, email: str, patient_name: str, therapy_name: str,
                                  scheduled_date, scheduled_time: str, status: str) -> SendResult:
        return self.send(
            email,
            "Appointment Reminder - AyurSutra",
            templates.appointment_reminder_email(
                patient_name, therapy_name, scheduled_date, scheduled_time, status,
            ),
        )

    def send_therapy_completion(self, email: str, patient_name: str, therapy_name: str,
                                scheduled_date, status: str) -> SendResult:
        return self.send(
            email,
            "Therapy Session Completed - AyurSutra",
            templates.therapy_completion_email(patient_name, therapy_name, scheduled_date, status),
        )

    def build_reset_url(self, reset_token: str) -> str:
        base = self.settings.frontend_url.rstrip("/")
        return f"{base}/reset-password?{urlencode({'token': reset_token})}"

    def send_password_reset_email(self, email: str, reset_token: str) -> SendResult:
        return self.send(
            email,
            "Password Reset Request - AyurSutra",
            templates.password_reset_email(
                self.build_reset_url(reset_token), self.settings.reset_token_expire_minutes,
            ),
        )

    def send_password_changed_notification(self, name: str, email: str) -> SendResult:
        return self.send(email, "Your AyurSutra password was changed", templates.password_changed_email(name))

    def send_test_email(self, to: str) -> SendResult:
        return self.send(
            to,
            "Test Email - AyurSutra Backend",
            templates.diagnostic_email(datetime.now(timezone.utc)),
        )


def deliver(description: str, send: Callable[..., SendResult], *args) -> SendResult:
    """
    Run one send and log a failure; used for best-effort notifications.

    Args:
        description: What is being sent, for the log line
        send: Bound EmailService method
        *args: Arguments for send

    Returns:
        SendResult: The outcome, for callers that report it
    """
    result = send(*args)
    if not result.success:
        logger.warning(f"Failed to send {description}: {result.error}")
    return result
