from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

if TYPE_CHECKING:
    from ..course.course_model import Lesson
    from ..course.enrollment_model import Enrollment


class ProgressStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CourseProgress(Base):
    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("enrollment_id", "lesson_id", name="uq_progress_enrollment_lesson"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    enrollment_id: Mapped[int] = mapped_column(Integer, ForeignKey("enrollments.id"), index=True, nullable=False)
    lesson_id: Mapped[int] = mapped_column(Integer, ForeignKey("lessons.id"), index=True, nullable=False)
    status: Mapped[ProgressStatus] = mapped_column(
        Enum(ProgressStatus, name="progressstatus", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=ProgressStatus.NOT_STARTED,
        server_default=ProgressStatus.NOT_STARTED.value,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    enrollment: Mapped["Enrollment"] = relationship(back_populates="progress")
    lesson: Mapped["Lesson"] = relationship()

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"<CourseProgress(enrollment_id={self.enrollment_id}, "
            f"lesson_id={self.lesson_id}, status='{self.status.value}')>"
        )
