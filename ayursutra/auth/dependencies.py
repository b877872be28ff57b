"""
FastAPI dependencies for authentication.
"""
from typing import Optional

from fastapi import BackgroundTasks, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import Settings
from ..core.dependencies import get_app_settings, get_email_service
from ..database import get_db
from ..exceptions import operation_errors
from ..notifications.service import EmailService
from .models import Practitioner
from .repository import CredentialStore
from .service import AuthService
from .tokens import TokenService

# Bearer scheme; missing credentials are reported by the auth service
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    notifier: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    """
    Build the auth service for the current request.

    Notifications are queued on the request's background tasks.
    """
    return AuthService(
        store=CredentialStore(db),
        tokens=tokens,
        notifier=notifier,
        settings=settings,
        background_tasks=background_tasks,
    )


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_current_practitioner(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Practitioner:
    """
    Get the practitioner behind the Authorization header.

    Raises:
        AuthenticationException: If the token is missing, invalid or expired
        NotFoundException: If the practitioner no longer exists
    """
    with operation_errors("Failed to fetch profile"):
        return auth_service.get_profile(token)
