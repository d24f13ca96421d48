from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    InvalidSubmissionError,
    LessonNotFoundError,
    QuizNotFoundError,
    QuizStructureError,
    UserNotFoundError,
)
from app.crud import lesson_crud, quiz_attempt_crud, quiz_crud, user_crud
from app.models.quiz.quiz_model import Question, QuestionType, Quiz, QuizAttempt
from app.schemas.quiz import quiz_schema
from app.services.quiz_validation_service import validate_quiz

logger = logging.getLogger(__name__)


def _normalize_text(value: Optional[str]) -> str:
    return (value or "").strip().casefold()


def is_response_correct(question: Question, response: Optional[quiz_schema.QuestionResponse]) -> bool:
    """Grade one response against the stored answers of ``question``."""
    if response is None:
        return False

    correct_ids = {answer.id for answer in question.answers if answer.correct}

    if question.type in (QuestionType.UNIQUE, QuestionType.BOOL):
        return response.selected_answer_id is not None and response.selected_answer_id in correct_ids

    if question.type == QuestionType.MULTIPLE:
        selected = set(response.selected_answer_ids or [])
        if response.selected_answer_id is not None:
            selected.add(response.selected_answer_id)
        return bool(selected) and selected == correct_ids

    if question.type == QuestionType.TEXT:
        expected = [answer.text for answer in question.answers if answer.correct]
        return bool(expected) and _normalize_text(response.text_response) == _normalize_text(expected[0])

    return False


class QuizService:
    """Quiz creation, lookup and grading."""

    def __init__(self, db: Session):
        self.db = db

    def create_quiz(self, payload: quiz_schema.QuizCreate) -> Quiz:
        """Validate the quiz structure, then store it under its lesson."""
        try:
            validate_quiz(payload)
        except QuizStructureError as exc:
            logger.warning("Quiz '%s' rejected: %s", payload.title, exc)
            raise

        if lesson_crud.get_lesson(self.db, payload.lesson_id) is None:
            raise LessonNotFoundError(payload.lesson_id)

        passing_score = (
            payload.passing_score
            if payload.passing_score is not None
            else settings.QUIZ_DEFAULT_PASSING_SCORE
        )
        quiz = quiz_crud.create_quiz(self.db, payload, passing_score=passing_score)
        logger.info(
            "Quiz %s created for lesson %s with %s question(s)",
            quiz.id,
            quiz.lesson_id,
            len(quiz.questions),
        )
        return quiz

    def get_quiz(self, quiz_id: int) -> Quiz:
        quiz = quiz_crud.get_quiz(self.db, quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        return quiz

    def list_lesson_quizzes(self, lesson_id: int) -> List[Quiz]:
        return quiz_crud.get_quizzes_by_lesson(self.db, lesson_id)

    def submit_quiz(self, quiz_id: int, submission: quiz_schema.QuizSubmission) -> QuizAttempt:
        """Grade ``submission`` and record it as a new attempt.

        Unanswered questions count as wrong. The attempt passes when the
        rounded percentage of correct answers reaches the quiz passing score.
        """
        quiz = self.get_quiz(quiz_id)
        if user_crud.get_user(self.db, submission.user_id) is None:
            raise UserNotFoundError(submission.user_id)

        questions_by_id: Dict[int, Question] = {question.id: question for question in quiz.questions}
        responses = {response.question_id: response for response in submission.responses}

        unknown = sorted(set(responses) - set(questions_by_id))
        if unknown:
            raise InvalidSubmissionError(
                f"Questions {unknown} do not belong to quiz {quiz.id}",
                context={"quiz_id": quiz.id, "question_ids": unknown},
            )

        total = len(questions_by_id)
        correct = sum(
            1 for question_id, question in questions_by_id.items()
            if is_response_correct(question, responses.get(question_id))
        )
        score = int(100 * correct / total + 0.5) if total else 0
        passed = score >= quiz.passing_score

        attempt = quiz_attempt_crud.create_attempt(
            self.db,
            user_id=submission.user_id,
            quiz_id=quiz.id,
            score=score,
            passed=passed,
        )
        logger.info(
            "Attempt %s recorded: user %s, quiz %s, score %s%% (%s)",
            attempt.id,
            attempt.user_id,
            attempt.quiz_id,
            score,
            "passed" if passed else "failed",
        )
        return attempt

    def list_attempts(self, quiz_id: int, user_id: Optional[int] = None) -> List[QuizAttempt]:
        return quiz_attempt_crud.list_attempts(self.db, quiz_id=quiz_id, user_id=user_id)
