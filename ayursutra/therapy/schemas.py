"""
Therapy Schemas - Pydantic models for therapy schedule data.

Dates are accepted as ISO-8601 strings and parsed by the service so that a
bad date is reported with the same error body as other validation failures.
"""
from typing import List, Optional

from ..auth.schemas import CamelModel, UTCDateTime
from .models import TherapyStatus


class TherapyScheduleCreate(CamelModel):
    """
    Therapy Schedule Create Schema

    Fields:
    - patient_id, practitioner_id, therapy_name, scheduled_date: Required
    - scheduled_time: Optional free text slot
    - status: Optional, defaults to scheduled
    - precautions: Optional list of instructions
    """
    patient_id: Optional[str] = None
    practitioner_id: Optional[str] = None
    therapy_name: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    status: Optional[TherapyStatus] = None
    precautions: Optional[List[str]] = None


class TherapyScheduleUpdate(CamelModel):
    """
    Therapy Schedule Update Schema - Only the fields present are applied
    """
    therapy_name: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    status: Optional[TherapyStatus] = None
    precautions: Optional[List[str]] = None


class TherapyFeedback(CamelModel):
    feedback: Optional[str] = None


class TherapyScheduleResponse(CamelModel):
    id: str
    patient_id: str
    practitioner_id: str
    therapy_name: str
    scheduled_date: UTCDateTime
    scheduled_time: str = ""
    status: TherapyStatus
    precautions: List[str] = []
    feedback: str = ""
    created_at: UTCDateTime
    updated_at: UTCDateTime


class TherapyScheduleDetailResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    schedule: TherapyScheduleResponse


class TherapyScheduleListResponse(CamelModel):
    success: bool = True
    schedules: List[TherapyScheduleResponse]
    count: int


class TherapyStats(CamelModel):
    total: int
    scheduled: int
    completed: int
    cancelled: int
    today: int


class TherapyStatsResponse(CamelModel):
    success: bool = True
    stats: TherapyStats
