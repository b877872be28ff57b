"""
Credential store for practitioner records.

Thin wrapper over the session; every store failure surfaces as a
StorageException and nothing is retried.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.security import hash_token
from ..exceptions import DuplicateUserException, StorageException
from .models import Practitioner

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Persists practitioner identity records.

    Args:
        db: Database session scoped to the current request
    """
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[Practitioner]:
        try:
            return self.db.query(Practitioner).filter(Practitioner.email == email).first()
        except SQLAlchemyError as e:
            raise StorageException(f"Failed to look up practitioner: {str(e)}")

    def find_by_id(self, practitioner_id: str) -> Optional[Practitioner]:
        try:
            return self.db.get(Practitioner, practitioner_id)
        except SQLAlchemyError as e:
            raise StorageException(f"Failed to look up practitioner: {str(e)}")

    def find_by_reset_token(self, token: str) -> Optional[Practitioner]:
        """
        Find the practitioner holding a reset token.

        Args:
            token: Plain reset token as received from the emailed link

        Returns:
            Practitioner or None
        """
        try:
            return (
                self.db.query(Practitioner)
                .filter(Practitioner.reset_token == hash_token(token))
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageException(f"Failed to look up reset token: {str(e)}")

    def insert(self, practitioner: Practitioner) -> Practitioner:
        """
        Insert a new practitioner.

        Raises:
            DuplicateUserException: If the email unique index rejects the row
            StorageException: On any other store failure
        """
        now = datetime.now(timezone.utc)
        practitioner.created_at = now
        practitioner.updated_at = now
        self.db.add(practitioner)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Insert rejected, email already registered: {practitioner.email}")
            raise DuplicateUserException()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageException(f"Failed to insert practitioner: {str(e)}")

        self.db.refresh(practitioner)
        return practitioner

    def update_reset_token(self, practitioner_id: str, token: str, expiry: datetime) -> None:
        """
        Store a reset token, replacing any outstanding one.

        Args:
            practitioner_id: Practitioner to update
            token: Plain reset token; only its hash is stored
            expiry: When the token stops working
        """
        self._update(practitioner_id, reset_token=hash_token(token), reset_token_expiry=expiry)

    def update_password(self, practitioner_id: str, token: str, password_hash: str) -> bool:
        """
        Replace the password hash and consume the reset token in one conditional write.

        The row only changes while it still holds this token and the token is
        unexpired, so of two requests racing with the same token only one wins.

        Returns:
            bool: False if the token was already consumed, replaced or expired
        """
        updated = self._update(
            practitioner_id,
            Practitioner.reset_token == hash_token(token),
            Practitioner.reset_token_expiry > datetime.now(timezone.utc),
            password_hash=password_hash,
            reset_token=None,
            reset_token_expiry=None,
        )
        return updated == 1

    def _update(self, practitioner_id: str, *conditions, **values) -> int:
        values["updated_at"] = datetime.now(timezone.utc)
        try:
            updated = (
                self.db.query(Practitioner)
                .filter(Practitioner.id == practitioner_id, *conditions)
                .update(values, synchronize_session="fetch")
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageException(f"Failed to update practitioner: {str(e)}")
        return updated
