"""
Practitioner Schemas - Pydantic models for auth request and response bodies.

Request fields are optional at the schema level so the auth service can
report missing values with its own validation messages.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

from ..core.security import as_utc

# Stores that drop tzinfo hand back naive UTC values
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON while accepting snake_case input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class PractitionerRegistration(CamelModel):
    """
    Practitioner Registration Schema

    Fields:
    - name: Practitioner's name
    - email: Login email
    - password: Plain text password (at least 6 characters)
    - clinic_name: Clinic name (optional)
    """
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    clinic_name: Optional[str] = None


class PractitionerLogin(CamelModel):
    """
    Practitioner Login Schema

    Fields:
    - email: Login email
    - password: Plain text password
    """
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordResetCompletion(CamelModel):
    """
    Password Reset Completion Schema - Consumes an emailed reset token

    Fields:
    - token: Reset token from the emailed link
    - new_password: Replacement password
    """
    token: Optional[str] = None
    new_password: Optional[str] = None


class PractitionerResponse(CamelModel):
    """
    Practitioner Response Schema - Never carries the password hash or reset token
    """
    id: str
    name: str
    email: str
    clinic_name: str = ""
    created_at: UTCDateTime
    updated_at: Optional[UTCDateTime] = None


class AuthResponse(CamelModel):
    """Returned after registration and login."""
    success: bool = True
    message: str
    practitioner: PractitionerResponse
    token: str


class ProfileResponse(CamelModel):
    success: bool = True
    practitioner: PractitionerResponse


class MessageResponse(CamelModel):
    success: bool = True
    message: str
