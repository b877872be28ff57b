"""
Authentication service layer for business logic.

Credential lifecycle of a practitioner:
Anonymous -> Registered -> Authenticated, and
Authenticated -> ResetRequested -> Authenticated. Completing a reset does not
revoke bearer tokens that were already issued.
"""
import logging
from typing import Callable, Optional, Tuple

from fastapi import BackgroundTasks

from ..config import Settings
from ..core.security import (
    MIN_PASSWORD_LENGTH,
    generate_secure_reset_token,
    get_token_expiry_time,
    hash_password,
    is_token_expired,
    verify_password,
)
from ..exceptions import (
    AuthenticationException,
    DuplicateUserException,
    NotFoundException,
    ValidationException,
)
from ..notifications.service import EmailService, SendResult, deliver
from .exceptions import (
    ExpiredTokenException,
    InvalidCredentialsException,
    InvalidTokenException,
    MissingTokenException,
)
from .models import Practitioner
from .repository import CredentialStore
from .tokens import TokenService

# Set up logging
logger = logging.getLogger(__name__)

PASSWORD_RESET_MESSAGE = "If the email exists, a password reset link has been sent"


class AuthService:
    """
    Orchestrates registration, login, profile lookup and password reset.

    Args:
        store: Credential store for the current request
        tokens: Bearer token service
        notifier: Email service used for best-effort notifications
        settings: Application settings
        background_tasks: When given, notifications run after the response
            is sent instead of inline
    """
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenService,
        notifier: EmailService,
        settings: Settings,
        background_tasks: Optional[BackgroundTasks] = None,
    ):
        self.store = store
        self.tokens = tokens
        self.notifier = notifier
        self.settings = settings
        self.background_tasks = background_tasks

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        clinic_name: Optional[str] = None,
    ) -> Tuple[Practitioner, str]:
        """
        Register a new practitioner.

        Args:
            name: Practitioner's name
            email: Login email
            password: Plain text password
            clinic_name: Optional clinic name

        Returns:
            Tuple of the created practitioner and a bearer token

        Raises:
            ValidationException: If a required field is missing or the password is too short
            DuplicateUserException: If the email is already registered
        """
        if not name or not email or not password:
            raise ValidationException("Name, email, and password are required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        if self.store.find_by_email(email):
            logger.info(f"Registration rejected: email already registered ({email})")
            raise DuplicateUserException()

        practitioner = self.store.insert(
            Practitioner(
                name=name,
                email=email,
                password_hash=hash_password(password),
                clinic_name=clinic_name or "",
            )
        )
        token = self.tokens.issue(practitioner.id, practitioner.email)
        logger.info(f"Practitioner registered: {practitioner.id} ({email})")

        self._dispatch(
            "welcome email",
            self.notifier.send_welcome_email,
            practitioner.name,
            practitioner.email,
            practitioner.clinic_name,
        )
        return practitioner, token

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[Practitioner, str]:
        """
        Authenticate a practitioner and issue a fresh token.

        Raises:
            ValidationException: If email or password is missing
            InvalidCredentialsException: For an unknown email or a wrong password alike
        """
        if not email or not password:
            raise ValidationException("Email and password are required")

        practitioner = self.store.find_by_email(email)
        if not practitioner or not verify_password(password, practitioner.password_hash):
            logger.warning(f"Login failed: Invalid credentials for {email}")
            raise InvalidCredentialsException()

        token = self.tokens.issue(practitioner.id, practitioner.email)
        logger.info(f"Login successful: Practitioner {practitioner.id} ({email})")
        return practitioner, token

    def get_profile(self, token: Optional[str]) -> Practitioner:
        """
        Resolve the practitioner behind a bearer token.

        Raises:
            MissingTokenException: If no token was presented
            AuthenticationException: If the token is invalid or expired
            NotFoundException: If the practitioner no longer exists
        """
        if not token:
            raise MissingTokenException()

        try:
            claims = self.tokens.verify(token)
        except (InvalidTokenException, ExpiredTokenException) as e:
            logger.info(f"Profile lookup rejected: {e.message}")
            raise AuthenticationException("Token is invalid or expired", error="Invalid token")

        practitioner = self.store.find_by_id(claims.practitioner_id)
        if not practitioner:
            raise NotFoundException("Practitioner not found")
        return practitioner

    def request_password_reset(self, email: Optional[str]) -> str:
        """
        Issue a reset token when the email belongs to a practitioner.

        The response is the same whether or not the email exists.

        Returns:
            str: Generic confirmation message
        """
        if not email:
            raise ValidationException("Email address is required")

        practitioner = self.store.find_by_email(email)
        if not practitioner:
            logger.info("Password reset requested for an unknown email")
            return PASSWORD_RESET_MESSAGE

        reset_token = generate_secure_reset_token()
        expiry = get_token_expiry_time(self.settings.reset_token_expire_minutes)
        self.store.update_reset_token(practitioner.id, reset_token, expiry)
        logger.info(f"Password reset token issued for practitioner {practitioner.id}")

        self._dispatch(
            "password reset email",
            self.notifier.send_password_reset_email,
            practitioner.email,
            reset_token,
        )
        return PASSWORD_RESET_MESSAGE

    def reset_password(self, token: Optional[str], new_password: Optional[str]) -> Practitioner:
        """
        Consume a reset token and set a new password.

        Raises:
            ValidationException: If the token or password is missing, or the password is too short
            AuthenticationException: If the token is unknown, already used or expired
        """
        if not token or not new_password:
            raise ValidationException("Reset token and new password are required")

        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        practitioner = self.store.find_by_reset_token(token)
        if (
            not practitioner
            or practitioner.reset_token_expiry is None
            or is_token_expired(practitioner.reset_token_expiry)
        ):
            logger.warning("Password reset failed: invalid or expired reset token")
            raise AuthenticationException("Invalid or expired reset token")

        if not self.store.update_password(practitioner.id, token, hash_password(new_password)):
            logger.warning("Password reset failed: reset token was consumed concurrently")
            raise AuthenticationException("Invalid or expired reset token")

        logger.info(f"Password reset successful for practitioner {practitioner.id}")

        self._dispatch(
            "password changed notification",
            self.notifier.send_password_changed_notification,
            practitioner.name,
            practitioner.email,
        )
        return practitioner

    def _dispatch(self, description: str, send: Callable[..., SendResult], *args) -> None:
        if self.background_tasks is not None:
            self.background_tasks.add_task(deliver, description, send, *args)
        else:
            deliver(description, send, *args)
