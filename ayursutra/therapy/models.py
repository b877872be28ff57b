"""
Therapy Schedule Model - Scheduled therapy sessions for a patient.
"""
import enum

from sqlalchemy import JSON, Column, DateTime, String, Text

from ..auth.models import _utcnow, generate_id
from ..database import Base


class TherapyStatus(str, enum.Enum):
    """Lifecycle states of a therapy session"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TherapySchedule(Base):
    """
    Therapy Schedule Model

    Fields:
    - id: Opaque identifier assigned on insert
    - patient_id: Patient receiving the therapy (plain reference)
    - practitioner_id: Practitioner running the therapy (plain reference)
    - therapy_name: Name of the therapy, e.g. Abhyanga
    - scheduled_date: Date and time of the session in UTC
    - scheduled_time: Free text time slot (may be empty)
    - status: scheduled, completed or cancelled
    - precautions: List of pre/post therapy instructions
    - feedback: Patient feedback after the session (may be empty)
    - created_at: When the schedule was created
    - updated_at: When the schedule was last updated
    """
    __tablename__ = "therapy_schedules"

    id = Column(String(32), primary_key=True, default=generate_id)
    patient_id = Column(String, nullable=False, index=True)
    practitioner_id = Column(String, nullable=False, index=True)
    therapy_name = Column(String, nullable=False)
    scheduled_date = Column(DateTime(timezone=True), nullable=False, index=True)
    scheduled_time = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default=TherapyStatus.SCHEDULED.value, index=True)
    precautions = Column(JSON, nullable=False, default=list)
    feedback = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        """String representation of the TherapySchedule model"""
        return f"<TherapySchedule(id={self.id}, therapy_name='{self.therapy_name}', status='{self.status}')>"

    @property
    def is_completed(self) -> bool:
        return self.status == TherapyStatus.COMPLETED.value
