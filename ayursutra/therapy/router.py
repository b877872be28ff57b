"""
Therapy Router - API endpoints for therapy schedules.
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..core.dependencies import get_email_service
from ..database import get_db
from ..exceptions import operation_errors
from ..notifications.service import EmailService
from ..patients.schemas import DeleteResponse
from . import service
from .models import TherapyStatus
from .schemas import (
    TherapyFeedback,
    TherapyScheduleCreate,
    TherapyScheduleDetailResponse,
    TherapyScheduleListResponse,
    TherapyScheduleResponse,
    TherapyScheduleUpdate,
    TherapyStats,
    TherapyStatsResponse,
)

router = APIRouter(prefix="/therapy", tags=["Therapy Schedules"])


def _list_response(schedules) -> TherapyScheduleListResponse:
    items = [TherapyScheduleResponse.model_validate(schedule) for schedule in schedules]
    return TherapyScheduleListResponse(schedules=items, count=len(items))


def _detail_response(schedule, message: Optional[str] = None) -> TherapyScheduleDetailResponse:
    return TherapyScheduleDetailResponse(
        message=message,
        schedule=TherapyScheduleResponse.model_validate(schedule),
    )


@router.post("", response_model=TherapyScheduleDetailResponse, status_code=status.HTTP_201_CREATED)
def create_schedule_route(schedule_data: TherapyScheduleCreate, db: Session = Depends(get_db)):
    """Create a therapy schedule."""
    with operation_errors("Failed to create therapy schedule"):
        schedule = service.create_schedule(db, schedule_data)
    return _detail_response(schedule, "Therapy schedule created successfully")


@router.get("/practitioner/{practitioner_id}", response_model=TherapyScheduleListResponse)
def practitioner_schedules_route(
    practitioner_id: str,
    status: Optional[TherapyStatus] = Query(None, description="Filter by status"),
    date: Optional[str] = Query(None, description="Only sessions on this day (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
):
    """Get all schedules for a practitioner, earliest first."""
    with operation_errors("Failed to fetch therapy schedules"):
        schedules = service.list_for_practitioner(db, practitioner_id, status=status, date=date)
    return _list_response(schedules)


@router.get("/patient/{patient_id}", response_model=TherapyScheduleListResponse)
def patient_schedules_route(
    patient_id: str,
    status: Optional[TherapyStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
):
    """Get all schedules for a patient, earliest first."""
    with operation_errors("Failed to fetch patient therapy schedules"):
        schedules = service.list_for_patient(db, patient_id, status=status)
    return _list_response(schedules)


@router.get("/stats/{practitioner_id}", response_model=TherapyStatsResponse)
def schedule_stats_route(practitioner_id: str, db: Session = Depends(get_db)):
    """Get therapy counts by status and for today."""
    with operation_errors("Failed to fetch therapy statistics"):
        stats = service.get_stats(db, practitioner_id)
    return TherapyStatsResponse(stats=TherapyStats(**stats))


@router.get("/{schedule_id}", response_model=TherapyScheduleDetailResponse)
def get_schedule_route(schedule_id: str, db: Session = Depends(get_db)):
    """Get a specific therapy schedule."""
    with operation_errors("Failed to fetch therapy schedule"):
        schedule = service.get_schedule(db, schedule_id)
    return _detail_response(schedule)


@router.put("/{schedule_id}", response_model=TherapyScheduleDetailResponse)
def update_schedule_route(
    schedule_id: str,
    schedule_data: TherapyScheduleUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: EmailService = Depends(get_email_service),
):
    """
    Update a schedule, e.g. mark it as completed.

    Completing a session emails the patient after the response is sent.
    """
    with operation_errors("Failed to update therapy schedule"):
        schedule, completed = service.update_schedule(db, schedule_id, schedule_data)
    if completed:
        service.queue_completion_notification(db, schedule, notifier, background_tasks)
    return _detail_response(schedule, "Therapy schedule updated successfully")


@router.post("/feedback/{schedule_id}", response_model=TherapyScheduleDetailResponse)
def add_feedback_route(schedule_id: str, feedback_data: TherapyFeedback, db: Session = Depends(get_db)):
    """Add patient feedback to a therapy session."""
    with operation_errors("Failed to add feedback"):
        schedule = service.add_feedback(db, schedule_id, feedback_data.feedback)
    return _detail_response(schedule, "Feedback added successfully")


@router.delete("/{schedule_id}", response_model=DeleteResponse)
def delete_schedule_route(schedule_id: str, db: Session = Depends(get_db)):
    """Delete a therapy schedule."""
    with operation_errors("Failed to delete therapy schedule"):
        deleted = service.delete_schedule(db, schedule_id)
    return DeleteResponse(message="Therapy schedule deleted successfully", deleted_count=deleted)
