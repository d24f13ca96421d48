from typing import Optional

from sqlalchemy.orm import Session

from app.models.course.course_model import Lesson


def get_lesson(db: Session, lesson_id: int) -> Optional[Lesson]:
    return db.get(Lesson, lesson_id)
