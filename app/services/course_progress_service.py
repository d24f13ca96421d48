from __future__ import annotations

import logging
import threading
from typing import List, Tuple
from weakref import WeakValueDictionary

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import EnrollmentNotFoundError, LessonNotFoundError, QuizRequirementUnmetError
from app.crud import course_progress_crud, enrollment_crud, lesson_crud, quiz_attempt_crud, quiz_crud
from app.models.course.course_model import Lesson
from app.models.course.enrollment_model import Enrollment
from app.models.progress.course_progress_model import CourseProgress, ProgressStatus
from app.schemas.progress.course_progress_schema import (
    AnalyticsResponse,
    CompletionRateResponse,
    CourseProgressResponse,
    UpdateProgressRequest,
)

logger = logging.getLogger(__name__)

PERCENTAGE_MULTIPLIER = 100


class _KeyedLocks:
    """One lock per (enrollment_id, lesson_id), released once nobody holds it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "WeakValueDictionary[Tuple[int, int], threading.Lock]" = WeakValueDictionary()

    def get(self, key: Tuple[int, int]) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


_progress_locks = _KeyedLocks()


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def to_response(progress: CourseProgress) -> CourseProgressResponse:
    return CourseProgressResponse(
        enrollment_id=progress.enrollment_id,
        lesson_id=progress.lesson_id,
        status=progress.status,
        lesson_title=progress.lesson.title if progress.lesson else None,
    )


class CourseProgressService:
    """Lesson progress per enrollment, with completion gated on quiz results."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def update_progress(self, payload: UpdateProgressRequest) -> CourseProgressResponse:
        """Create or update the progress row of a lesson.

        Moving a lesson to ``completed`` requires a passing attempt on every
        quiz attached to it; other statuses are written without that check.
        """
        enrollment = enrollment_crud.get_enrollment(self.db, payload.enrollment_id, with_user=True)
        if enrollment is None:
            logger.warning("Progress update refused: enrollment %s not found", payload.enrollment_id)
            raise EnrollmentNotFoundError(payload.enrollment_id)

        lesson = lesson_crud.get_lesson(self.db, payload.lesson_id)
        if lesson is None:
            logger.warning("Progress update refused: lesson %s not found", payload.lesson_id)
            raise LessonNotFoundError(payload.lesson_id)

        with _progress_locks.get((enrollment.id, lesson.id)):
            if payload.status == ProgressStatus.COMPLETED:
                self._check_quiz_requirements(enrollment.user.id, lesson.id)

            progress = self._upsert(enrollment, lesson, payload.status)

        logger.info(
            "Progress of lesson %s for enrollment %s set to %s",
            lesson.id,
            enrollment.id,
            progress.status.value,
        )
        return to_response(progress)

    def get_course_progress(self, enrollment_id: int) -> List[CourseProgressResponse]:
        rows = course_progress_crud.list_progress_by_enrollment(self.db, enrollment_id)
        return [to_response(row) for row in rows]

    def get_completion_rate(self, enrollment_id: int) -> CompletionRateResponse:
        total = course_progress_crud.count_progress(self.db, enrollment_id=enrollment_id)
        if total == 0:
            return CompletionRateResponse(enrollment_id=enrollment_id, completed=0, total=0, completion_rate=0)

        completed = course_progress_crud.count_progress(
            self.db,
            enrollment_id=enrollment_id,
            status=ProgressStatus.COMPLETED,
        )
        return CompletionRateResponse(
            enrollment_id=enrollment_id,
            completed=completed,
            total=total,
            completion_rate=_round_half_up(completed / total * PERCENTAGE_MULTIPLIER),
        )

    def get_analytics(self) -> AnalyticsResponse:
        """Completion figures across every enrollment."""
        total_progress = course_progress_crud.count_progress(self.db)
        completed = course_progress_crud.count_progress(self.db, status=ProgressStatus.COMPLETED)
        rate = (completed / total_progress) * PERCENTAGE_MULTIPLIER if total_progress > 0 else 0.0
        return AnalyticsResponse(
            total_progress=total_progress,
            completed=completed,
            overall_completion_rate=rate,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_quiz_requirements(self, user_id: int, lesson_id: int) -> None:
        for quiz in quiz_crud.get_quizzes_by_lesson(self.db, lesson_id):
            attempt = quiz_attempt_crud.get_governing_attempt(self.db, user_id, quiz.id)
            if attempt is None or not attempt.passed:
                logger.warning(
                    "User %s cannot complete lesson %s: quiz %s ('%s') not passed",
                    user_id,
                    lesson_id,
                    quiz.id,
                    quiz.title,
                )
                raise QuizRequirementUnmetError(quiz.title, quiz_id=quiz.id)

    def _upsert(self, enrollment: Enrollment, lesson: Lesson, status: ProgressStatus) -> CourseProgress:
        progress = course_progress_crud.get_progress(self.db, enrollment.id, lesson.id)
        if progress is None:
            progress = CourseProgress(enrollment_id=enrollment.id, lesson_id=lesson.id, status=status)
            try:
                return course_progress_crud.save_progress(self.db, progress)
            except IntegrityError:
                # Another process inserted the same pair first: update its row.
                logger.info(
                    "Concurrent insert detected for enrollment %s / lesson %s, updating instead",
                    enrollment.id,
                    lesson.id,
                )
                progress = course_progress_crud.get_progress(self.db, enrollment.id, lesson.id)
                if progress is None:
                    raise

        progress.status = status
        return course_progress_crud.save_progress(self.db, progress)
