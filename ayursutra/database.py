"""
Database connection and session management.
Provides the SQLAlchemy engine, session factory, and base class for models.
"""
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings

logger = logging.getLogger(__name__)

# Create base class for declarative models
Base = declarative_base()


class Database:
    """
    Owns the engine and session factory for one application instance.

    Args:
        settings: Application settings providing the database URL
    """
    def __init__(self, settings: Settings):
        self.url = settings.database_url
        engine_kwargs = {}
        if self.url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live on a single shared connection
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    def verify_connection(self) -> None:
        """
        Run a trivial query to make sure the store is reachable.

        Raises:
            SQLAlchemyError: If the connection cannot be established
        """
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def create_all(self) -> None:
        """Create tables for every registered model if they don't exist."""
        # Import models so they register with Base.metadata
        from .auth import models as _auth_models  # noqa: F401
        from .patients import models as _patient_models  # noqa: F401
        from .therapy import models as _therapy_models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Database dependency - Creates and yields a database session.

    The session is automatically closed after the request is processed,
    even if an exception occurs during request handling.

    Yields:
        SQLAlchemy Session: Database session
    """
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
