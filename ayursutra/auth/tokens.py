"""
JWT bearer token creation and verification.

Tokens are stateless: verification only checks the signature and expiry,
so a token stays valid until it expires even after the practitioner logs out.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ..config import Settings
from .exceptions import ExpiredTokenException, InvalidTokenException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified bearer token."""
    practitioner_id: str
    email: str


class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens.

    Args:
        secret_key: Key used to sign tokens
        algorithm: JWT signing algorithm
        expires_delta: Lifetime of issued tokens
    """
    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 expires_delta: timedelta = timedelta(hours=24)):
        if not secret_key:
            raise ValueError("A signing key is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

    def issue(self, practitioner_id: str, email: str, now: Optional[datetime] = None) -> str:
        """
        Create a signed token for a practitioner.

        Args:
            practitioner_id: Identifier of the practitioner
            email: Practitioner's email
            now: Issue time, defaults to the current time

        Returns:
            str: Encoded JWT token
        """
        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            "practitionerId": str(practitioner_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify and decode a token.

        Args:
            token: JWT token string

        Returns:
            TokenClaims: Practitioner id and email from the token

        Raises:
            ExpiredTokenException: If the token is past its expiry
            InvalidTokenException: If the signature or structure is invalid
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ExpiredTokenException()
        except JWTError as e:
            logger.debug(f"Token rejected: {str(e)}")
            raise InvalidTokenException()

        practitioner_id = payload.get("practitionerId")
        email = payload.get("email")
        if not practitioner_id or not email:
            raise InvalidTokenException("Token payload is incomplete")

        return TokenClaims(practitioner_id=practitioner_id, email=email)
