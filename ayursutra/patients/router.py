"""
Patient Router - API endpoints for patient records.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import operation_errors
from .schemas import (
    DeleteResponse,
    PatientCreate,
    PatientDetailResponse,
    PatientListResponse,
    PatientResponse,
    PatientUpdate,
)
from . import service

router = APIRouter(prefix="/patients", tags=["Patients"])


def _list_response(patients) -> PatientListResponse:
    items = [PatientResponse.model_validate(patient) for patient in patients]
    return PatientListResponse(patients=items, count=len(items))


@router.get("/single/{patient_id}", response_model=PatientDetailResponse)
def get_patient_route(patient_id: str, db: Session = Depends(get_db)):
    """Get a specific patient."""
    with operation_errors("Failed to fetch patient"):
        patient = service.get_patient(db, patient_id)
    return PatientDetailResponse(patient=PatientResponse.model_validate(patient))


@router.get("/search/{practitioner_id}", response_model=PatientListResponse)
def search_patients_route(
    practitioner_id: str,
    q: Optional[str] = Query(None, description="Substring of the patient's name or email"),
    db: Session = Depends(get_db),
):
    """Search a practitioner's patients by name or email."""
    with operation_errors("Failed to search patients"):
        patients = service.search_patients(db, practitioner_id, q)
    return _list_response(patients)


@router.get("/{practitioner_id}", response_model=PatientListResponse)
def list_patients_route(practitioner_id: str, db: Session = Depends(get_db)):
    """Get all patients for a practitioner, newest first."""
    with operation_errors("Failed to fetch patients"):
        patients = service.list_patients(db, practitioner_id)
    return _list_response(patients)


@router.post("", response_model=PatientDetailResponse, status_code=status.HTTP_201_CREATED)
def create_patient_route(patient_data: PatientCreate, db: Session = Depends(get_db)):
    """Create a new patient."""
    with operation_errors("Failed to create patient"):
        patient = service.create_patient(db, patient_data)
    return PatientDetailResponse(
        message="Patient created successfully",
        patient=PatientResponse.model_validate(patient),
    )


@router.put("/{patient_id}", response_model=PatientDetailResponse)
def update_patient_route(patient_id: str, patient_data: PatientUpdate, db: Session = Depends(get_db)):
    """
    Update a patient's details.

    Only the fields present in the body are changed.
    """
    with operation_errors("Failed to update patient"):
        patient = service.update_patient(db, patient_id, patient_data)
    return PatientDetailResponse(
        message="Patient updated successfully",
        patient=PatientResponse.model_validate(patient),
    )


@router.delete("/{patient_id}", response_model=DeleteResponse)
def delete_patient_route(patient_id: str, db: Session = Depends(get_db)):
    """Delete a patient."""
    with operation_errors("Failed to delete patient"):
        deleted = service.delete_patient(db, patient_id)
    return DeleteResponse(message="Patient deleted successfully", deleted_count=deleted)
