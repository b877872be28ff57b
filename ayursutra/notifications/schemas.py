"""
Email Schemas - Request and response bodies for the email endpoints.
"""
from typing import Optional

from pydantic import EmailStr

from ..auth.schemas import CamelModel


class DiagnosticEmailRequest(CamelModel):
    to: Optional[EmailStr] = None


class WelcomeEmailRequest(CamelModel):
    practitioner_id: Optional[str] = None


class AppointmentReminderRequest(CamelModel):
    patient_id: Optional[str] = None
    appointment_id: Optional[str] = None


class TherapyCompletionRequest(CamelModel):
    patient_id: Optional[str] = None
    therapy_id: Optional[str] = None


class PasswordResetEmailRequest(CamelModel):
    email: Optional[str] = None


class EmailSentResponse(CamelModel):
    success: bool = True
    message: str
    message_id: Optional[str] = None
