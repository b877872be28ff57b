"""
Practitioner Model - Stores practitioner credentials and profile.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from ..database import Base


def generate_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Practitioner(Base):
    """
    Practitioner Model - An authenticated clinic-owner account

    Fields:
    - id: Opaque identifier assigned on insert
    - name: Practitioner's display name
    - email: Login email, stored as given and unique across practitioners
    - password_hash: bcrypt hash of the password
    - clinic_name: Name of the clinic (empty when not provided)
    - reset_token: SHA-256 hash of the outstanding password reset token
    - reset_token_expiry: When the outstanding reset token stops working
    - created_at: When the account was created
    - updated_at: When the account was last updated
    """
    __tablename__ = "practitioners"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    clinic_name = Column(String, nullable=False, default="")
    reset_token = Column(String(64), nullable=True, index=True)
    reset_token_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        """String representation of the Practitioner model"""
        return f"<Practitioner(id={self.id}, email='{self.email}')>"

    @property
    def has_pending_reset(self) -> bool:
        return self.reset_token is not None
