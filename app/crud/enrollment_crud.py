from typing import Optional

from sqlalchemy.orm import Session, joinedload

from app.models.course.enrollment_model import Enrollment


def get_enrollment(db: Session, enrollment_id: int, *, with_user: bool = False) -> Optional[Enrollment]:
    """Return the enrollment, eagerly joined with its user when ``with_user`` is set."""
    query = db.query(Enrollment)
    if with_user:
        query = query.options(joinedload(Enrollment.user))
    return query.filter(Enrollment.id == enrollment_id).first()
