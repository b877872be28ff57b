"""
Email routes - explicitly requested transactional emails.

Unlike the best-effort notifications sent by other flows, these endpoints
report a failed delivery to the caller as a 500.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth.dependencies import get_auth_service
from ..auth.repository import CredentialStore
from ..auth.schemas import MessageResponse
from ..auth.service import AuthService
from ..core.dependencies import get_email_service
from ..database import get_db
from ..exceptions import (
    EmailDeliveryException,
    NotFoundException,
    ValidationException,
    operation_errors,
)
from ..patients import service as patient_service
from ..therapy import service as therapy_service
from .schemas import (
    AppointmentReminderRequest,
    EmailSentResponse,
    PasswordResetEmailRequest,
    DiagnosticEmailRequest,
    TherapyCompletionRequest,
    WelcomeEmailRequest,
)
from .service import EmailService, SendResult

router = APIRouter(prefix="/email", tags=["Email"])


def _sent(result: SendResult, message: str) -> EmailSentResponse:
    if not result.success:
        raise EmailDeliveryException(result.error)
    return EmailSentResponse(message=message, message_id=result.message_id)


@router.post("/test", response_model=EmailSentResponse)
def send_test_email_route(request: DiagnosticEmailRequest, notifier: EmailService = Depends(get_email_service)):
    """Send a test email to check the transport configuration."""
    if not request.to:
        raise ValidationException("Email address is required")

    with operation_errors("Failed to send test email"):
        return _sent(notifier.send_test_email(str(request.to)), "Test email sent successfully")


@router.post("/welcome", response_model=EmailSentResponse)
def send_welcome_email_route(
    request: WelcomeEmailRequest,
    db: Session = Depends(get_db),
    notifier: EmailService = Depends(get_email_service),
):
    """Send the welcome email to a practitioner."""
    if not request.practitioner_id:
        raise ValidationException("Practitioner ID is required")

    with operation_errors("Failed to send welcome email"):
        practitioner = CredentialStore(db).find_by_id(request.practitioner_id)
        if not practitioner:
            raise NotFoundException("Practitioner not found")
        result = notifier.send_welcome_email(
            practitioner.name, practitioner.email, practitioner.clinic_name
        )
        return _sent(result, "Welcome email sent successfully")


@router.post("/appointment-reminder", response_model=EmailSentResponse)
def send_appointment_reminder_route(
    request: AppointmentReminderRequest,
    db: Session = Depends(get_db),
    notifier: EmailService = Depends(get_email_service),
):
    """Remind a patient about an upcoming therapy session."""
    if not request.patient_id or not request.appointment_id:
        raise ValidationException("Patient ID and appointment ID are required")

    with operation_errors("Failed to send appointment reminder"):
        patient = patient_service.get_patient(db, request.patient_id)
        schedule = therapy_service.get_schedule(db, request.appointment_id)
        if not patient.email:
            raise ValidationException("Patient has no email address")
        result = notifier.send_appointment_reminder(
            patient.email, patient.name, schedule.therapy_name,
            schedule.scheduled_date, schedule.scheduled_time, schedule.status,
        )
        return _sent(result, "Appointment reminder sent successfully")


@router.post("/therapy-completion", response_model=EmailSentResponse)
def send_therapy_completion_route(
    request: TherapyCompletionRequest,
    db: Session = Depends(get_db),
    notifier: EmailService = Depends(get_email_service),
):
    """Tell a patient their therapy session is complete."""
    if not request.patient_id or not request.therapy_id:
        raise ValidationException("Patient ID and therapy ID are required")

    with operation_errors("Failed to send therapy completion notification"):
        patient = patient_service.get_patient(db, request.patient_id)
        schedule = therapy_service.get_schedule(db, request.therapy_id)
        if not patient.email:
            raise ValidationException("Patient has no email address")
        result = notifier.send_therapy_completion(
            patient.email, patient.name, schedule.therapy_name,
            schedule.scheduled_date, schedule.status,
        )
        return _sent(result, "Therapy completion notification sent successfully")


@router.post("/password-reset", response_model=MessageResponse)
def request_password_reset_route(
    request: PasswordResetEmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Request a password reset link.

    The response does not reveal whether the email belongs to an account.
    """
    with operation_errors("Failed to send password reset email"):
        message = auth_service.request_password_reset(request.email)
    return MessageResponse(message=message)
