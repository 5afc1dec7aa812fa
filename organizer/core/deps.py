"""
Common dependencies for FastAPI endpoints.
"""
from typing import Generator
from uuid import UUID

from sqlalchemy.orm import Session

from organizer.core.exceptions import BadRequestError
from organizer.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def parse_uuid(value: str, name: str = "ID") -> UUID:
    """Parse a path parameter as UUID, raising 400 on malformed input."""
    try:
        return UUID(value)
    except ValueError:
        raise BadRequestError(f"Invalid {name} format")
