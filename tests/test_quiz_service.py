from __future__ import annotations

import pytest

from app.core.errors import (
    InvalidSubmissionError,
    InvalidUniqueQuestionError,
    LessonNotFoundError,
    QuizNotFoundError,
    UserNotFoundError,
)
from app.models.quiz.quiz_model import Answer, Question, QuestionType, Quiz, QuizAttempt
from app.schemas.quiz.quiz_schema import QuizCreate, QuizSubmission
from app.services.quiz_service import QuizService
from tests.utils import create_lesson, create_quiz, create_user


def _payload(lesson_id: int, **overrides) -> QuizCreate:
    data = {
        "lesson_id": lesson_id,
        "title": "  Basics  ",
        "questions": [
            {
                "text": "Pick one",
                "type": "UNIQUE",
                "answers": [{"text": "A", "correct": True}, {"text": "B", "correct": False}],
            },
            {
                "text": "Pick many",
                "type": "multiple",
                "answers": [
                    {"text": "A", "correct": True},
                    {"text": "B", "correct": True},
                    {"text": "C", "correct": False},
                ],
            },
            {
                "text": "Is water wet?",
                "type": "bool",
                "answers": [{"text": "Yes", "correct": True}, {"text": "No", "correct": False}],
            },
        ],
    }
    data.update(overrides)
    return QuizCreate(**data)


def _correct_ids(question: Question) -> list[int]:
    return [answer.id for answer in question.answers if answer.correct]


def _wrong_id(question: Question) -> int:
    return next(answer.id for answer in question.answers if not answer.correct)


def test_create_quiz_persists_questions_and_answers(db_session):
    lesson = create_lesson(db_session)
    service = QuizService(db_session)

    quiz = service.create_quiz(_payload(lesson.id))

    assert quiz.title == "Basics"
    assert quiz.passing_score == 70
    assert [q.type for q in quiz.questions] == [QuestionType.UNIQUE, QuestionType.MULTIPLE, QuestionType.BOOL]
    assert [q.position for q in quiz.questions] == [1, 2, 3]
    assert db_session.query(Answer).count() == 7


def test_create_quiz_keeps_explicit_passing_score(db_session):
    lesson = create_lesson(db_session)
    quiz = QuizService(db_session).create_quiz(_payload(lesson.id, passing_score=100))
    assert quiz.passing_score == 100


def test_invalid_quiz_is_not_persisted(db_session):
    lesson = create_lesson(db_session)
    payload = _payload(
        lesson.id,
        questions=[
            {
                "text": "Broken",
                "type": "unique",
                "answers": [{"text": "A", "correct": True}, {"text": "B", "correct": True}],
            }
        ],
    )

    with pytest.raises(InvalidUniqueQuestionError):
        QuizService(db_session).create_quiz(payload)
    assert db_session.query(Quiz).count() == 0


def test_structure_is_validated_before_lesson_lookup(db_session):
    with pytest.raises(InvalidUniqueQuestionError):
        QuizService(db_session).create_quiz(
            _payload(
                999,
                questions=[{"text": "?", "type": "unique", "answers": [{"text": "A", "correct": True}]}],
            )
        )


def test_create_quiz_requires_existing_lesson(db_session):
    with pytest.raises(LessonNotFoundError):
        QuizService(db_session).create_quiz(_payload(999))


def test_get_quiz_not_found(db_session):
    with pytest.raises(QuizNotFoundError) as exc:
        QuizService(db_session).get_quiz(42)
    assert exc.value.status_code == 404


def test_list_lesson_quizzes(db_session):
    lesson = create_lesson(db_session)
    other = create_lesson(db_session, title="Other lesson", course=lesson.module.course)
    first = create_quiz(db_session, lesson, title="First")
    second = create_quiz(db_session, lesson, title="Second")
    create_quiz(db_session, other, title="Elsewhere")

    quizzes = QuizService(db_session).list_lesson_quizzes(lesson.id)
    assert [quiz.id for quiz in quizzes] == [first.id, second.id]


def test_submit_quiz_all_correct_passes(db_session):
    user = create_user(db_session)
    lesson = create_lesson(db_session)
    service = QuizService(db_session)
    quiz = service.create_quiz(_payload(lesson.id))
    unique, multiple, boolean = quiz.questions

    submission = QuizSubmission(
        user_id=user.id,
        responses=[
            {"question_id": unique.id, "selected_answer_id": _correct_ids(unique)[0]},
            {"question_id": multiple.id, "selected_answer_ids": _correct_ids(multiple)},
            {"question_id": boolean.id, "selected_answer_id": _correct_ids(boolean)[0]},
        ],
    )
    attempt = service.submit_quiz(quiz.id, submission)

    assert attempt.score == 100
    assert attempt.passed is True
    assert attempt.user_id == user.id


def test_submit_quiz_partial_multiple_selection_is_wrong(db_session):
    user = create_user(db_session)
    lesson = create_lesson(db_session)
    service = QuizService(db_session)
    quiz = service.create_quiz(_payload(lesson.id))
    unique, multiple, boolean = quiz.questions

    attempt = service.submit_quiz(
        quiz.id,
        QuizSubmission(
            user_id=user.id,
            responses=[
                {"question_id": unique.id, "selected_answer_id": _correct_ids(unique)[0]},
                {"question_id": multiple.id, "selected_answer_ids": _correct_ids(multiple)[:1]},
                {"question_id": boolean.id, "selected_answer_id": _wrong_id(boolean)},
            ],
        ),
    )

    assert attempt.score == 33
    assert attempt.passed is False


def test_submit_text_answer_is_case_insensitive_and_unanswered_counts_wrong(db_session):
    user = create_user(db_session)
    lesson = create_lesson(db_session)
    quiz = create_quiz(db_session, lesson, passing_score=50)
    _, text_question = quiz.questions

    attempt = QuizService(db_session).submit_quiz(
        quiz.id,
        QuizSubmission(
            user_id=user.id,
            responses=[{"question_id": text_question.id, "text_response": "  paris "}],
        ),
    )

    assert attempt.score == 50
    assert attempt.passed is True


def test_submit_quiz_rejects_foreign_questions(db_session):
    user = create_user(db_session)
    lesson = create_lesson(db_session)
    quiz = create_quiz(db_session, lesson)

    with pytest.raises(InvalidSubmissionError):
        QuizService(db_session).submit_quiz(
            quiz.id,
            QuizSubmission(user_id=user.id, responses=[{"question_id": 9999, "selected_answer_id": 1}]),
        )
    assert db_session.query(QuizAttempt).count() == 0


def test_submit_quiz_requires_known_user(db_session):
    lesson = create_lesson(db_session)
    quiz = create_quiz(db_session, lesson)

    with pytest.raises(UserNotFoundError):
        QuizService(db_session).submit_quiz(quiz.id, QuizSubmission(user_id=404, responses=[]))


def test_list_attempts_newest_first(db_session):
    user = create_user(db_session)
    lesson = create_lesson(db_session)
    quiz = create_quiz(db_session, lesson)
    service = QuizService(db_session)

    first = service.submit_quiz(quiz.id, QuizSubmission(user_id=user.id, responses=[]))
    second = service.submit_quiz(quiz.id, QuizSubmission(user_id=user.id, responses=[]))

    attempts = service.list_attempts(quiz.id, user_id=user.id)
    assert [attempt.id for attempt in attempts] == [second.id, first.id]
