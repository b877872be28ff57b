"""
Patient Schemas - Pydantic models for patient data validation and serialization.
"""
from typing import List, Optional

from ..auth.schemas import CamelModel, UTCDateTime


class PatientCreate(CamelModel):
    """
    Patient Create Schema

    Fields:
    - practitioner_id: Owning practitioner (required)
    - name: Patient's name (required)
    - email, phone, primary_dosha, health_notes: Optional, default to ""
    """
    practitioner_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    primary_dosha: Optional[str] = None
    health_notes: Optional[str] = None


class PatientUpdate(CamelModel):
    """
    Patient Update Schema - Only the fields present in the request are applied
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    primary_dosha: Optional[str] = None
    health_notes: Optional[str] = None


class PatientResponse(CamelModel):
    id: str
    practitioner_id: str
    name: str
    email: str = ""
    phone: str = ""
    primary_dosha: str = ""
    health_notes: str = ""
    created_at: UTCDateTime
    updated_at: UTCDateTime


class PatientDetailResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    patient: PatientResponse


class PatientListResponse(CamelModel):
    success: bool = True
    patients: List[PatientResponse]
    count: int


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_count: int = 1
