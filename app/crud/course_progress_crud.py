from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.models.progress.course_progress_model import CourseProgress, ProgressStatus


def get_progress(db: Session, enrollment_id: int, lesson_id: int) -> Optional[CourseProgress]:
    """Return the progress row of one lesson within one enrollment."""
    return (
        db.query(CourseProgress)
        .options(joinedload(CourseProgress.lesson))
        .filter(
            CourseProgress.enrollment_id == enrollment_id,
            CourseProgress.lesson_id == lesson_id,
        )
        .first()
    )


def list_progress_by_enrollment(db: Session, enrollment_id: int) -> List[CourseProgress]:
    return (
        db.query(CourseProgress)
        .options(joinedload(CourseProgress.lesson))
        .filter(CourseProgress.enrollment_id == enrollment_id)
        .order_by(CourseProgress.lesson_id.asc())
        .all()
    )


def save_progress(db: Session, progress: CourseProgress) -> CourseProgress:
    """Insert or update ``progress`` and return the refreshed row.

    Lets ``IntegrityError`` propagate (after rolling back) so callers can
    resolve a concurrent insert of the same (enrollment, lesson) pair.
    """
    db.add(progress)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(progress)
    return progress


def count_progress(
    db: Session,
    *,
    enrollment_id: int | None = None,
    status: ProgressStatus | None = None,
) -> int:
    query = db.query(CourseProgress)
    if enrollment_id is not None:
        query = query.filter(CourseProgress.enrollment_id == enrollment_id)
    if status is not None:
        query = query.filter(CourseProgress.status == status)
    return query.count()
