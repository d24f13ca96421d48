"""Domain exceptions shared by the quiz and course-progress services.

Services raise these at the point of detection; routers log ``code`` and turn
them into ``HTTPException`` responses using ``status_code`` and ``message``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for every error the application reports to API callers."""

    status_code: int = 500
    code: str = "application_error"

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        return self.message


# ----------------------------------------------------------------------
# Structural errors raised while validating a quiz creation request
# ----------------------------------------------------------------------
class QuizStructureError(AppError):
    status_code = 400
    code = "invalid_quiz_structure"

    def __init__(self, message: str, question_index: Optional[int] = None):
        context = {"question_index": question_index} if question_index is not None else None
        super().__init__(message, context=context)
        self.question_index = question_index


class EmptyQuizError(QuizStructureError):
    code = "empty_quiz"

    def __init__(self) -> None:
        super().__init__("Quiz must have at least one question")


class EmptyAnswersError(QuizStructureError):
    code = "empty_answers"


class InvalidUniqueQuestionError(QuizStructureError):
    code = "invalid_unique_question"


class InvalidMultipleQuestionError(QuizStructureError):
    code = "invalid_multiple_question"


class InvalidTextQuestionError(QuizStructureError):
    code = "invalid_text_question"


class InvalidBoolQuestionError(QuizStructureError):
    code = "invalid_bool_question"


class UnknownQuestionTypeError(QuizStructureError):
    code = "unknown_question_type"


# ----------------------------------------------------------------------
# Missing entities
# ----------------------------------------------------------------------
class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class EnrollmentNotFoundError(NotFoundError):
    code = "enrollment_not_found"

    def __init__(self, enrollment_id: int):
        super().__init__("Enrollment not found", context={"enrollment_id": enrollment_id})


class LessonNotFoundError(NotFoundError):
    code = "lesson_not_found"

    def __init__(self, lesson_id: int):
        super().__init__("Lesson not found", context={"lesson_id": lesson_id})


class QuizNotFoundError(NotFoundError):
    code = "quiz_not_found"

    def __init__(self, quiz_id: int):
        super().__init__(f"Quiz with ID {quiz_id} not found", context={"quiz_id": quiz_id})


class UserNotFoundError(NotFoundError):
    code = "user_not_found"

    def __init__(self, user_id: int):
        super().__init__("User not found", context={"user_id": user_id})


# ----------------------------------------------------------------------
# Business preconditions
# ----------------------------------------------------------------------
class QuizRequirementUnmetError(AppError):
    status_code = 400
    code = "quiz_requirement_unmet"

    def __init__(self, quiz_title: str, quiz_id: Optional[int] = None):
        super().__init__(
            f'Cannot complete lesson. You must pass the quiz "{quiz_title}" first.',
            context={"quiz_id": quiz_id, "quiz_title": quiz_title},
        )
        self.quiz_title = quiz_title
        self.quiz_id = quiz_id


class InvalidSubmissionError(AppError):
    status_code = 400
    code = "invalid_submission"
