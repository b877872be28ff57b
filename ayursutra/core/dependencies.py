"""
FastAPI dependencies handing out the per-application services.

create_app() builds the settings, database, token service and email service
once and stores them on app.state; these functions read them back.
"""
from fastapi import Request

from ..config import Settings
from ..notifications.service import EmailService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service
