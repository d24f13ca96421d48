"""Structural checks applied to a quiz before anything is persisted.

The checks are pure: they only look at the request payload. Questions are
scanned in order and the first broken rule is reported, using the 1-based
position of the offending question in the message.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from app.core.errors import (
    EmptyAnswersError,
    EmptyQuizError,
    InvalidBoolQuestionError,
    InvalidMultipleQuestionError,
    InvalidTextQuestionError,
    InvalidUniqueQuestionError,
    QuizStructureError,
    UnknownQuestionTypeError,
)
from app.models.quiz.quiz_model import QuestionType

BOOL_ANSWER_PAIRS = (("true", "false"), ("yes", "no"))


def _count_correct(answers: Sequence[Any]) -> int:
    return sum(1 for answer in answers if answer.correct)


def _check_unique(answers: Sequence[Any], prefix: str, index: int) -> Optional[QuizStructureError]:
    if len(answers) < 2:
        return InvalidUniqueQuestionError(
            f"{prefix}: Unique choice questions must have at least 2 answers", index
        )
    if _count_correct(answers) != 1:
        return InvalidUniqueQuestionError(
            f"{prefix}: Unique choice questions must have exactly one correct answer", index
        )
    return None


def _check_multiple(answers: Sequence[Any], prefix: str, index: int) -> Optional[QuizStructureError]:
    if len(answers) < 2:
        return InvalidMultipleQuestionError(
            f"{prefix}: Multiple choice questions must have at least 2 answers", index
        )
    if _count_correct(answers) == 0:
        return InvalidMultipleQuestionError(
            f"{prefix}: Multiple choice questions must have at least one correct answer", index
        )
    return None


def _check_text(answers: Sequence[Any], prefix: str, index: int) -> Optional[QuizStructureError]:
    if len(answers) != 1:
        return InvalidTextQuestionError(f"{prefix}: Text questions must have exactly one answer", index)
    if not answers[0].correct:
        return InvalidTextQuestionError(f"{prefix}: Text question answer must be marked as correct", index)
    return None


def _check_bool(answers: Sequence[Any], prefix: str, index: int) -> Optional[QuizStructureError]:
    if len(answers) != 2:
        return InvalidBoolQuestionError(
            f"{prefix}: Boolean questions must have exactly 2 answers (true/false)", index
        )
    if _count_correct(answers) != 1:
        return InvalidBoolQuestionError(
            f"{prefix}: Boolean questions must have exactly one correct answer", index
        )

    # Membership test, not strict pairing.
    texts = {(answer.text or "").strip().lower() for answer in answers}
    if not any(yes in texts and no in texts for yes, no in BOOL_ANSWER_PAIRS):
        return InvalidBoolQuestionError(
            f"{prefix}: Boolean questions should have true/false or yes/no answers", index
        )
    return None


_TYPE_CHECKS: Dict[QuestionType, Callable[[Sequence[Any], str, int], Optional[QuizStructureError]]] = {
    QuestionType.UNIQUE: _check_unique,
    QuestionType.MULTIPLE: _check_multiple,
    QuestionType.TEXT: _check_text,
    QuestionType.BOOL: _check_bool,
}


def _resolve_question_type(raw: Any) -> Optional[QuestionType]:
    if isinstance(raw, QuestionType):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return QuestionType(raw.strip().lower())
    except ValueError:
        return None


def find_question_violation(question: Any, index: int) -> Optional[QuizStructureError]:
    """Return the first rule ``question`` breaks, ``index`` being 1-based."""

    prefix = f"Question {index}"
    answers = list(question.answers or [])
    if not answers:
        return EmptyAnswersError(f"{prefix}: Must have at least one answer", index)

    question_type = _resolve_question_type(question.type)
    if question_type is None:
        return UnknownQuestionTypeError(f"{prefix}: Invalid question type", index)

    return _TYPE_CHECKS[question_type](answers, prefix, index)


def find_quiz_violation(quiz: Any) -> Optional[QuizStructureError]:
    """Scan a quiz creation payload and return its first structural error, if any."""

    questions = list(quiz.questions or [])
    if not questions:
        return EmptyQuizError()

    for index, question in enumerate(questions, start=1):
        violation = find_question_violation(question, index)
        if violation is not None:
            return violation
    return None


def validate_quiz(quiz: Any) -> None:
    """Raise the first :class:`QuizStructureError` found in ``quiz``."""

    violation = find_quiz_violation(quiz)
    if violation is not None:
        raise violation
