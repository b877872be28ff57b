"""
Authentication-specific exceptions.
"""
from ..exceptions import AuthenticationException


class InvalidCredentialsException(AuthenticationException):
    """Exception raised when email or password is wrong."""
    default_message = "Invalid credentials"


class InvalidTokenException(AuthenticationException):
    """Exception raised when a token signature or structure is invalid."""
    error = "Invalid token"
    default_message = "Token is invalid"


class ExpiredTokenException(AuthenticationException):
    """Exception raised when a token has expired."""
    error = "Invalid token"
    default_message = "Token has expired"


class MissingTokenException(AuthenticationException):
    """Exception raised when a protected route is called without a token."""
    error = "Authentication required"
    default_message = "No token provided"
