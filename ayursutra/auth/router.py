"""
Authentication routes for practitioners.
"""
from fastapi import APIRouter, Depends, status

from ..exceptions import operation_errors
from .dependencies import get_auth_service, get_current_practitioner
from .models import Practitioner
from .schemas import (
    AuthResponse,
    MessageResponse,
    PasswordResetCompletion,
    PractitionerLogin,
    PractitionerRegistration,
    PractitionerResponse,
    ProfileResponse,
)
from .service import AuthService

# Create API router
router = APIRouter(prefix="/practitioner", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new practitioner",
)
def register_route(
    registration: PractitionerRegistration,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Practitioner registration endpoint.

    Returns the created practitioner and a bearer token. A welcome email is
    sent after the response; its failure does not undo the registration.
    """
    with operation_errors("Failed to register practitioner"):
        practitioner, token = auth_service.register(
            name=registration.name,
            email=registration.email,
            password=registration.password,
            clinic_name=registration.clinic_name,
        )

    return AuthResponse(
        message="Practitioner registered successfully",
        practitioner=PractitionerResponse.model_validate(practitioner),
        token=token,
    )


@router.post("/login", response_model=AuthResponse, summary="Login practitioner")
def login_route(
    login_data: PractitionerLogin,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Practitioner login endpoint.

    Unknown email and wrong password produce the same 401 body.
    """
    with operation_errors("Failed to login practitioner"):
        practitioner, token = auth_service.login(login_data.email, login_data.password)

    return AuthResponse(
        message="Login successful",
        practitioner=PractitionerResponse.model_validate(practitioner),
        token=token,
    )


@router.get("/profile", response_model=ProfileResponse, summary="Get practitioner profile")
def profile_route(practitioner: Practitioner = Depends(get_current_practitioner)):
    """
    Return the practitioner identified by the bearer token.
    """
    return ProfileResponse(practitioner=PractitionerResponse.model_validate(practitioner))


@router.post("/reset-password", response_model=MessageResponse, summary="Reset password with token")
def reset_password_route(
    reset_data: PasswordResetCompletion,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Consume an emailed reset token and set a new password.

    Bearer tokens issued before the reset stay valid until they expire.
    """
    with operation_errors("Failed to reset password"):
        auth_service.reset_password(reset_data.token, reset_data.new_password)

    return MessageResponse(
        message="Password reset successful. You can now log in with your new password"
    )
