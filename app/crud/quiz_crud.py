from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.quiz.quiz_model import Answer, Question, QuestionType, Quiz
from app.schemas.quiz import quiz_schema


def create_quiz(db: Session, payload: quiz_schema.QuizCreate, *, passing_score: int) -> Quiz:
    """Persist a quiz together with its questions and answers in one commit.

    ``payload`` must already have passed structural validation: question types
    are coerced to :class:`QuestionType` here.
    """
    quiz = Quiz(lesson_id=payload.lesson_id, title=payload.title.strip(), passing_score=passing_score)
    for position, question_in in enumerate(payload.questions, start=1):
        question = Question(
            text=question_in.text,
            type=QuestionType(question_in.type.strip().lower()),
            position=position,
        )
        for answer_in in question_in.answers:
            question.answers.append(Answer(text=answer_in.text, correct=answer_in.correct))
        quiz.questions.append(question)

    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    return quiz


def get_quiz(db: Session, quiz_id: int) -> Optional[Quiz]:
    return (
        db.query(Quiz)
        .options(selectinload(Quiz.questions).selectinload(Question.answers))
        .filter(Quiz.id == quiz_id)
        .first()
    )


def get_quizzes_by_lesson(db: Session, lesson_id: int) -> List[Quiz]:
    """All quizzes attached to a lesson, oldest first."""
    return (
        db.query(Quiz)
        .filter(Quiz.lesson_id == lesson_id)
        .order_by(Quiz.id.asc())
        .all()
    )
