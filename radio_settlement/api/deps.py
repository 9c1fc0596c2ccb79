"""
Dependencies for database sessions.
"""
from typing import Generator
from sqlalchemy.orm import Session
from radio_settlement.database import SessionLocal
from radio_settlement.utils import get_logger

logger = get_logger(__name__)

def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.
    One session per request; the settlement pipeline owns it exclusively
    while it runs and commits or rolls it back itself.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error", error=str(e), exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()
