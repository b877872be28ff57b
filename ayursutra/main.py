"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .auth.router import router as auth_router
from .auth.tokens import TokenService
from .config import Settings, get_settings
from .core.middleware import setup_middlewares
from .database import Database
from .exceptions import register_exception_handlers
from .notifications.router import router as email_router
from .notifications.service import EmailService
from .patients.router import router as patients_router
from .therapy.router import router as therapy_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Connect to the store before serving and release it on shutdown.

    The process exits if the store is unreachable at startup.
    """
    database: Database = app.state.database
    try:
        database.verify_connection()
    except SQLAlchemyError as e:
        logger.error(f"❌ Database connection failed: {str(e)}")
        raise SystemExit(1)

    database.create_all()
    logger.info("🚀 AyurSutra API started")
    if not app.state.settings.mail_configured:
        logger.warning("Email credentials are not configured, notifications will fail")

    yield

    database.dispose()
    logger.info("AyurSutra API stopped")


def create_app(settings: Optional[Settings] = None, email_service: Optional[EmailService] = None) -> FastAPI:
    """
    Build the application with its own store, token and email services.

    Args:
        settings: Settings to use, loaded from the environment when omitted
        email_service: Email service to use, built on SMTP when omitted

    Returns:
        FastAPI: The configured application
    """
    if settings is None:
        load_dotenv()
        settings = get_settings()

    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_name,
        description="API for the AyurSutra Panchakarma management system",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.email_service = email_service or EmailService(settings)

    register_exception_handlers(app, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middlewares(app)

    app.include_router(auth_router, prefix="/api")
    app.include_router(patients_router, prefix="/api")
    app.include_router(therapy_router, prefix="/api")
    app.include_router(email_router, prefix="/api")

    @app.get("/")
    def root():
        """
        Root endpoint.

        Returns:
            dict: Simple welcome message
        """
        return {"message": "Welcome to AyurSutra API"}

    @app.get("/health")
    def health_check(request: Request):
        """
        Health check endpoint for monitoring.

        Returns:
            dict: Health status information
        """
        return {
            "status": "OK",
            "message": "AyurSutra API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": request.app.state.settings.environment,
        }

    @app.get("/api")
    def api_index():
        """List the available endpoint groups."""
        return {
            "message": "AyurSutra API",
            "version": __version__,
            "endpoints": {
                "health": "GET /health",
                "practitioner": {
                    "register": "POST /api/practitioner/register",
                    "login": "POST /api/practitioner/login",
                    "profile": "GET /api/practitioner/profile",
                    "resetPassword": "POST /api/practitioner/reset-password",
                },
                "patients": {
                    "list": "GET /api/patients/:practitionerId",
                    "get": "GET /api/patients/single/:id",
                    "search": "GET /api/patients/search/:practitionerId?q=",
                    "create": "POST /api/patients",
                    "update": "PUT /api/patients/:id",
                    "delete": "DELETE /api/patients/:id",
                },
                "therapy": {
                    "create": "POST /api/therapy",
                    "byPractitioner": "GET /api/therapy/practitioner/:practitionerId",
                    "byPatient": "GET /api/therapy/patient/:patientId",
                    "stats": "GET /api/therapy/stats/:practitionerId",
                    "get": "GET /api/therapy/:id",
                    "update": "PUT /api/therapy/:id",
                    "feedback": "POST /api/therapy/feedback/:id",
                    "delete": "DELETE /api/therapy/:id",
                },
                "email": {
                    "test": "POST /api/email/test",
                    "welcome": "POST /api/email/welcome",
                    "appointmentReminder": "POST /api/email/appointment-reminder",
                    "therapyCompletion": "POST /api/email/therapy-completion",
                    "passwordReset": "POST /api/email/password-reset",
                },
            },
        }

    return app


app = create_app()
