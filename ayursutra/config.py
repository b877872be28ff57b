"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string for the document store
        secret_key: Secret key for JWT token signing
        algorithm: Algorithm used for JWT signing (HS256)
        access_token_expire_minutes: Bearer token lifetime (24 hours)
        reset_token_expire_minutes: Password reset token lifetime (1 hour)

        # Email settings
        mail_username: SMTP account username
        mail_password: SMTP account password (app password for Gmail)
        mail_from: Sender address, falls back to mail_username
        mail_server: SMTP server hostname
        mail_port: SMTP server port
        mail_starttls: Whether to upgrade the connection with STARTTLS
        mail_ssl_tls: Whether to connect with implicit TLS
        mail_timeout: SMTP connection timeout in seconds

        # Frontend settings
        frontend_url: Base URL used to build password reset links
        cors_origins: Origins allowed by the CORS middleware

        environment: development, test or production
        log_level: Root logging level
    """
    app_name: str = "AyurSutra API"

    # Database settings
    database_url: str

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    reset_token_expire_minutes: int = 60

    # Email settings
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_from: Optional[str] = None
    mail_server: str = "smtp.gmail.com"
    mail_port: int = 587
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    mail_timeout: int = 30

    # Frontend settings
    frontend_url: str = "http://localhost:5173"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:8080"]

    environment: str = "development"
    log_level: str = "INFO"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def mail_configured(self) -> bool:
        """True when enough SMTP credentials are present to send mail."""
        return bool(self.mail_username and self.mail_password and self.mail_server)

    @property
    def sender_address(self) -> Optional[str]:
        return self.mail_from or self.mail_username


@lru_cache
def get_settings() -> Settings:
    """
    Load settings once per process.

    Returns:
        Settings: Application settings
    """
    return Settings()
