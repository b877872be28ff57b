"""
Core security utilities for password hashing and reset tokens.
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext

# Password hashing context; cost factor 10
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

MIN_PASSWORD_LENGTH = 6
RESET_TOKEN_BYTES = 32


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def generate_secure_reset_token() -> str:
    """
    Generate a secure token for password reset.

    Returns:
        str: URL-safe random token carrying 256 bits of entropy
    """
    return secrets.token_urlsafe(RESET_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """
    Hash a token for secure storage.

    Args:
        token: Token to hash

    Returns:
        str: Hex encoded SHA-256 digest
    """
    return hashlib.sha256(token.encode()).hexdigest()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes read back from stores that drop tzinfo.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_token_expired(expiry_time: datetime) -> bool:
    """
    Check if a token has expired.

    Args:
        expiry_time: Token expiration time

    Returns:
        bool: True if token has expired
    """
    return utcnow() > as_utc(expiry_time)


def get_token_expiry_time(minutes: int = 60) -> datetime:
    """
    Get token expiration time.

    Args:
        minutes: Minutes until expiration

    Returns:
        datetime: Expiration time
    """
    return utcnow() + timedelta(minutes=minutes)
