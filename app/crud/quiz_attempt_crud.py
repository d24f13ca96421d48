from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.quiz.quiz_model import QuizAttempt


def create_attempt(db: Session, *, user_id: int, quiz_id: int, score: int, passed: bool) -> QuizAttempt:
    attempt = QuizAttempt(user_id=user_id, quiz_id=quiz_id, score=score, passed=passed)
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt


def get_governing_attempt(db: Session, user_id: int, quiz_id: int) -> Optional[QuizAttempt]:
    """Return the attempt that decides whether ``user_id`` passed ``quiz_id``.

    The most recent passing attempt wins; without any, the most recent attempt
    is returned. A failed retry never hides an earlier pass.
    """
    return (
        db.query(QuizAttempt)
        .filter(QuizAttempt.user_id == user_id, QuizAttempt.quiz_id == quiz_id)
        .order_by(
            QuizAttempt.passed.desc(),
            QuizAttempt.created_at.desc(),
            QuizAttempt.id.desc(),
        )
        .first()
    )


def list_attempts(db: Session, *, quiz_id: int, user_id: int | None = None) -> List[QuizAttempt]:
    query = db.query(QuizAttempt).filter(QuizAttempt.quiz_id == quiz_id)
    if user_id is not None:
        query = query.filter(QuizAttempt.user_id == user_id)
    return query.order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc()).all()
