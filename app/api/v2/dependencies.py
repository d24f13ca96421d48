from typing import Generator

from sqlalchemy.orm import Session

from app.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Provide one SQLAlchemy session per request, closed once the response is sent."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
