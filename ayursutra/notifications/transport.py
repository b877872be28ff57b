"""
SMTP transport for outbound email.

One connection per message, no retries; the connection timeout is the only
time limit.
"""
import logging
import smtplib
import ssl
from email.message import EmailMessage

from ..config import Settings

logger = logging.getLogger(__name__)


class TransportNotConfigured(Exception):
    """Raised when mail credentials are missing."""


class SMTPTransport:
    """
    Sends prepared messages through the configured SMTP account.

    Args:
        settings: Application settings with the mail_* values
    """
    def __init__(self, settings: Settings):
        self.settings = settings

    def send_message(self, message: EmailMessage) -> None:
        """
        Deliver one message.

        Raises:
            TransportNotConfigured: If SMTP credentials are missing
            smtplib.SMTPException, OSError: On delivery failure
        """
        settings = self.settings
        if not settings.mail_configured:
            raise TransportNotConfigured("Email transport is not configured")

        context = ssl.create_default_context()
        logger.debug(f"Connecting to SMTP server {settings.mail_server}:{settings.mail_port}")

        if settings.mail_ssl_tls:
            server = smtplib.SMTP_SSL(
                settings.mail_server, settings.mail_port,
                timeout=settings.mail_timeout, context=context,
            )
        else:
            server = smtplib.SMTP(settings.mail_server, settings.mail_port, timeout=settings.mail_timeout)

        with server:
            server.ehlo()
            if settings.mail_starttls and not settings.mail_ssl_tls:
                server.starttls(context=context)
                server.ehlo()
            server.login(settings.mail_username, settings.mail_password)
            server.send_message(message)
