"""
Global exception handlers and custom exception classes.

Every error leaves the API as ``{"error": <kind>, "message": <text>}``.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings

# Set up logging
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = {
    "health": "GET /health",
    "api": "GET /api",
    "auth": "POST /api/practitioner/register, POST /api/practitioner/login",
    "patients": "GET /api/patients/:practitionerId, POST /api/patients",
    "therapies": "POST /api/therapy, GET /api/therapy/practitioner/:practitionerId",
}


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.

    Attributes:
        status_code: HTTP status returned to the client
        error: Short error kind
        message: Human readable description
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        if error:
            self.error = error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ValidationException(AppException):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"
    default_message = "Invalid request"


class DuplicateUserException(AppException):
    """A practitioner with this email already exists."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "User already exists"
    default_message = "Practitioner with this email already exists"


class AuthenticationException(AppException):
    """Bad credentials or bad bearer token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Authentication failed"
    default_message = "Invalid credentials"


class NotFoundException(AppException):
    """Referenced record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"
    default_message = "Resource not found"


class StorageException(AppException):
    """The document store failed."""
    default_message = "Database operation failed"


class InternalErrorException(AppException):
    """Anything unexpected, reported with an operation specific message."""


class EmailDeliveryException(AppException):
    """An explicitly requested email could not be delivered."""
    error = "Email sending failed"
    default_message = "Failed to send email"


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    if exc.status_code >= 500:
        logger.error(f"Application error on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.error} on {request.method} {request.url.path}: {exc.message}")

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Malformed JSON and schema mismatches both become a 400.
    """
    errors = exc.errors()
    logger.warning(f"Validation error on {request.method} {request.url.path}: {errors}")

    if any(error.get("type") == "json_invalid" for error in errors):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid JSON",
                "message": "The request body contains invalid JSON format",
            },
        )

    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "message": "; ".join(messages)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for framework raised HTTP errors such as unmatched routes.
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Route not found",
                "message": f"Cannot {request.method} {request.url.path}",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "Request failed", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app, settings: Settings):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Settings deciding whether raw error messages are exposed
    """
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Something went wrong!",
                "message": "Internal server error" if settings.is_production else str(exc),
            },
        )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


@contextmanager
def operation_errors(failure_message: str):
    """
    Map failures inside a route to the public error taxonomy.

    Application exceptions pass through unchanged, except store failures,
    which are reported as a generic internal error carrying failure_message.
    Anything unexpected is logged and reported the same way.

    Args:
        failure_message: Message shown to the client on a 500
    """
    try:
        yield
    except StorageException as e:
        logger.error(f"{failure_message}: {e.message}")
        raise InternalErrorException(failure_message)
    except AppException:
        raise
    except Exception as e:
        logger.exception(f"{failure_message}: {str(e)}")
        raise InternalErrorException(failure_message)
