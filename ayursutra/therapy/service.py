"""
Therapy Service - CRUD, filtering and statistics for therapy schedules.
"""
import logging
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from fastapi import BackgroundTasks
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import NotFoundException, StorageException, ValidationException
from ..notifications.service import EmailService, deliver
from ..patients.models import Patient
from .models import TherapySchedule, TherapyStatus
from .schemas import TherapyScheduleCreate, TherapyScheduleUpdate

# Set up logging
logger = logging.getLogger(__name__)

REQUIRED_ON_UPDATE = {
    "therapy_name": "Therapy name",
    "scheduled_date": "Scheduled date",
    "status": "Status",
}


def parse_datetime(value: str, label: str = "date") -> datetime:
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime.

    Date-only values mean midnight UTC; naive datetimes are taken as UTC.

    Raises:
        ValidationException: If the value cannot be parsed
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationException(f"Invalid {label}: expected an ISO-8601 date")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def day_window(value: str) -> Tuple[datetime, datetime]:
    """Return the [start, end) UTC window of the day named by value."""
    start = datetime.combine(parse_datetime(value).date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageException(f"Failed to {action}: {str(e)}")


def create_schedule(db: Session, schedule_data: TherapyScheduleCreate) -> TherapySchedule:
    """
    Create a therapy schedule.

    Raises:
        ValidationException: If a required field is missing or the date is invalid
    """
    if not (
        schedule_data.patient_id
        and schedule_data.practitioner_id
        and schedule_data.therapy_name
        and schedule_data.scheduled_date
    ):
        raise ValidationException(
            "Patient ID, practitioner ID, therapy name, and scheduled date are required"
        )

    now = datetime.now(timezone.utc)
    schedule = TherapySchedule(
        patient_id=schedule_data.patient_id,
        practitioner_id=schedule_data.practitioner_id,
        therapy_name=schedule_data.therapy_name,
        scheduled_date=parse_datetime(schedule_data.scheduled_date, "scheduled date"),
        scheduled_time=schedule_data.scheduled_time or "",
        status=(schedule_data.status or TherapyStatus.SCHEDULED).value,
        precautions=list(schedule_data.precautions or []),
        feedback="",
        created_at=now,
        updated_at=now,
    )
    db.add(schedule)
    _commit(db, "create therapy schedule")
    db.refresh(schedule)

    logger.info(f"Therapy schedule {schedule.id} created for patient {schedule.patient_id}")
    return schedule


def get_schedule(db: Session, schedule_id: str) -> TherapySchedule:
    """
    Raises:
        NotFoundException: If the schedule does not exist
    """
    try:
        schedule = db.get(TherapySchedule, schedule_id)
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to fetch therapy schedule: {str(e)}")
    if not schedule:
        raise NotFoundException("Therapy schedule not found")
    return schedule


def list_for_practitioner(
    db: Session,
    practitioner_id: str,
    status: Optional[TherapyStatus] = None,
    date: Optional[str] = None,
) -> List[TherapySchedule]:
    """
    Get a practitioner's schedules ordered by scheduled date.

    Args:
        db: Database session
        practitioner_id: Owning practitioner
        status: Optional status filter
        date: Optional day (YYYY-MM-DD) to restrict to

    Raises:
        ValidationException: If date cannot be parsed
    """
    query = db.query(TherapySchedule).filter(TherapySchedule.practitioner_id == practitioner_id)

    if status:
        query = query.filter(TherapySchedule.status == status.value)

    if date:
        start, end = day_window(date)
        query = query.filter(TherapySchedule.scheduled_date >= start, TherapySchedule.scheduled_date < end)

    try:
        return query.order_by(TherapySchedule.scheduled_date.asc()).all()
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to fetch therapy schedules: {str(e)}")


def list_for_patient(
    db: Session,
    patient_id: str,
    status: Optional[TherapyStatus] = None,
) -> List[TherapySchedule]:
    query = db.query(TherapySchedule).filter(TherapySchedule.patient_id == patient_id)
    if status:
        query = query.filter(TherapySchedule.status == status.value)

    try:
        return query.order_by(TherapySchedule.scheduled_date.asc()).all()
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to fetch patient therapy schedules: {str(e)}")


def update_schedule(
    db: Session,
    schedule_id: str,
    schedule_data: TherapyScheduleUpdate,
) -> Tuple[TherapySchedule, bool]:
    """
    Apply a partial update.

    Returns:
        Tuple of the updated schedule and whether this update completed it

    Raises:
        ValidationException: If a required field is sent empty or the date is invalid
        NotFoundException: If the schedule does not exist
    """
    update_data = schedule_data.model_dump(exclude_unset=True)
    for field, label in REQUIRED_ON_UPDATE.items():
        if field in update_data and not update_data[field]:
            raise ValidationException(f"{label} cannot be empty")

    if "scheduled_date" in update_data:
        update_data["scheduled_date"] = parse_datetime(update_data["scheduled_date"], "scheduled date")
    if "status" in update_data:
        update_data["status"] = update_data["status"].value
    if "scheduled_time" in update_data:
        update_data["scheduled_time"] = update_data["scheduled_time"] or ""
    if "precautions" in update_data:
        update_data["precautions"] = list(update_data["precautions"] or [])

    schedule = get_schedule(db, schedule_id)
    was_completed = schedule.is_completed

    for field, value in update_data.items():
        setattr(schedule, field, value)
    schedule.updated_at = datetime.now(timezone.utc)

    _commit(db, "update therapy schedule")
    db.refresh(schedule)
    logger.info(f"Therapy schedule {schedule_id} updated: {sorted(update_data)}")
    return schedule, schedule.is_completed and not was_completed


def add_feedback(db: Session, schedule_id: str, feedback: Optional[str]) -> TherapySchedule:
    """
    Record patient feedback for a session.

    Raises:
        ValidationException: If feedback is empty
        NotFoundException: If the schedule does not exist
    """
    if not feedback:
        raise ValidationException("Feedback is required")

    schedule = get_schedule(db, schedule_id)
    schedule.feedback = feedback
    schedule.updated_at = datetime.now(timezone.utc)

    _commit(db, "add feedback")
    db.refresh(schedule)
    return schedule


def delete_schedule(db: Session, schedule_id: str) -> int:
    """
    Raises:
        NotFoundException: If no record matched
    """
    try:
        deleted = (
            db.query(TherapySchedule)
            .filter(TherapySchedule.id == schedule_id)
            .delete(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageException(f"Failed to delete therapy schedule: {str(e)}")

    if deleted == 0:
        raise NotFoundException("Therapy schedule not found")

    _commit(db, "delete therapy schedule")
    logger.info(f"Therapy schedule {schedule_id} deleted")
    return deleted


def get_stats(db: Session, practitioner_id: str, now: Optional[datetime] = None) -> dict:
    """
    Count a practitioner's schedules by status and for the current UTC day.
    """
    now = now or datetime.now(timezone.utc)
    start, end = day_window(now.date().isoformat())

    try:
        by_status = dict(
            db.query(TherapySchedule.status, func.count(TherapySchedule.id))
            .filter(TherapySchedule.practitioner_id == practitioner_id)
            .group_by(TherapySchedule.status)
            .all()
        )
        today = (
            db.query(func.count(TherapySchedule.id))
            .filter(
                TherapySchedule.practitioner_id == practitioner_id,
                TherapySchedule.scheduled_date >= start,
                TherapySchedule.scheduled_date < end,
            )
            .scalar()
        )
    except SQLAlchemyError as e:
        raise StorageException(f"Failed to fetch therapy statistics: {str(e)}")

    return {
        "total": sum(by_status.values()),
        "scheduled": by_status.get(TherapyStatus.SCHEDULED.value, 0),
        "completed": by_status.get(TherapyStatus.COMPLETED.value, 0),
        "cancelled": by_status.get(TherapyStatus.CANCELLED.value, 0),
        "today": today or 0,
    }


def queue_completion_notification(
    db: Session,
    schedule: TherapySchedule,
    notifier: EmailService,
    background_tasks: BackgroundTasks,
) -> bool:
    """
    Queue a therapy completion email for the schedule's patient.

    Returns:
        bool: False when no email could be queued for the patient
    """
    try:
        patient = db.get(Patient, schedule.patient_id)
    except SQLAlchemyError as e:
        logger.warning(f"No completion email for schedule {schedule.id}: patient lookup failed: {str(e)}")
        return False

    if not patient or not patient.email:
        logger.info(f"No completion email for schedule {schedule.id}: patient has no email")
        return False

    background_tasks.add_task(
        deliver,
        "therapy completion email",
        notifier.send_therapy_completion,
        patient.email,
        patient.name,
        schedule.therapy_name,
        schedule.scheduled_date,
        schedule.status,
    )
    return True
