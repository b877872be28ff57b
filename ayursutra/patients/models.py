"""
Patient Model - Stores patient records owned by a practitioner.
"""
from sqlalchemy import Column, DateTime, String, Text

from ..auth.models import _utcnow, generate_id
from ..database import Base


class Patient(Base):
    """
    Patient Model - Stores patient-specific information

    Fields:
    - id: Opaque identifier assigned on insert
    - practitioner_id: Owning practitioner (plain reference, not a foreign key)
    - name: Patient's name
    - email: Contact email (may be empty)
    - phone: Contact phone (may be empty)
    - primary_dosha: Ayurvedic constitution (may be empty)
    - health_notes: Free text notes (may be empty)
    - created_at: When the record was created
    - updated_at: When the record was last updated
    """
    __tablename__ = "patients"

    id = Column(String(32), primary_key=True, default=generate_id)
    practitioner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    primary_dosha = Column(String, nullable=False, default="")
    health_notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, practitioner_id={self.practitioner_id})>"
