"""
Patient Service - CRUD for patient records.

Store failures surface as StorageException; nothing is retried.
"""
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import NotFoundException, StorageException, ValidationException
from .models import Patient
from .schemas import PatientCreate, PatientUpdate

# Set up logging
logger = logging.getLogger(__name__)

OPTIONAL_FIELDS = ("email", "phone", "primary_dosha", "health_notes")


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageException(f"Failed to {action}: {str(e)}")


def create_patient(db: Session, patient_data: PatientCreate) -> Patient:
    """
    Create a patient record.

    Args:
        db: Database session
        patient_data: Submitted fields

    Returns:
        Patient: The stored record

    Raises:
        ValidationException: If practitioner id or name is missing
    """
    if not patient_data.practitioner_id or not patient_data.name:
        raise ValidationException("Practitioner ID and name are required")

    now = datetime.now(timezone.utc)
    patient = Patient(
        practitioner_id=patient_data.practitioner_id,
        name=patient_data.name,
        created_at=now,
        updated_at=now,
        **{field: getattr(patient_data, field) or "" for field in OPTIONAL_FIELDS},
    )
    db.add(patient)
    _commit(db, "create patient")
    db.refresh(patient)

    logger.info(f"Patient {patient.id} created for practitioner {patient.practitioner_id}")
    return patient


def get_patient(db: Session, patient_id: str) -> Patient:
    """
    Get a patient by ID.

    Raises:
        NotFoundException: If the patient does not exist
    """
    try:
        patient = db.get(Patient, patient_id)
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to fetch patient: {str(e)}")
    if not patient:
        raise NotFoundException("Patient not found")
    return patient


def list_patients(db: Session, practitioner_id: str) -> List[Patient]:
    """
    Get all patients of a practitioner, newest first.
    """
    try:
        return (
            db.query(Patient)
            .filter(Patient.practitioner_id == practitioner_id)
            .order_by(Patient.created_at.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to fetch patients: {str(e)}")


def search_patients(db: Session, practitioner_id: str, query: str) -> List[Patient]:
    """
    Case-insensitive substring search on name or email within one practitioner.

    Raises:
        ValidationException: If the search query is empty
    """
    if not query:
        raise ValidationException("Search query is required")

    # Match % and _ literally
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    try:
        return (
            db.query(Patient)
            .filter(Patient.practitioner_id == practitioner_id)
            .filter(or_(
                Patient.name.ilike(pattern, escape="\\"),
                Patient.email.ilike(pattern, escape="\\"),
            ))
            .order_by(Patient.created_at.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to search patients: {str(e)}")


def update_patient(db: Session, patient_id: str, patient_data: PatientUpdate) -> Patient:
    """
    Apply a partial update.

    Only fields present in the request change; updated_at is always refreshed.

    Raises:
        ValidationException: If name is present but empty
        NotFoundException: If the patient does not exist
    """
    update_data = patient_data.model_dump(exclude_unset=True)
    if "name" in update_data and not update_data["name"]:
        raise ValidationException("Name is required")

    patient = get_patient(db, patient_id)

    for field, value in update_data.items():
        setattr(patient, field, value if value is not None else "")
    patient.updated_at = datetime.now(timezone.utc)

    _commit(db, "update patient")
    db.refresh(patient)
    logger.info(f"Patient {patient_id} updated: {sorted(update_data)}")
    return patient


def delete_patient(db: Session, patient_id: str) -> int:
    """
    Delete a patient.

    Returns:
        int: Number of deleted records

    Raises:
        NotFoundException: If no record matched
    """
    try:
        deleted = db.query(Patient).filter(Patient.id == patient_id).delete(synchronize_session=False)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageException(f"Failed to delete patient: {str(e)}")

    if deleted == 0:
        raise NotFoundException("Patient not found")

    _commit(db, "delete patient")
    logger.info(f"Patient {patient_id} deleted")
    return deleted
