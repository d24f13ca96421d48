from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_db
from app.core.errors import AppError
from app.schemas.quiz import quiz_schema
from app.services.quiz_service import QuizService

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_http_error(exc: AppError) -> HTTPException:
    logger.info("Quiz request rejected [%s]: %s", exc.code, exc.message)
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post(
    "",
    response_model=quiz_schema.QuizRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a quiz for a lesson",
)
def create_quiz(
    payload: quiz_schema.QuizCreate,
    db: Session = Depends(get_db),
):
    """Rejects structurally invalid quizzes before anything is stored."""
    service = QuizService(db=db)
    try:
        return service.create_quiz(payload)
    except AppError as exc:
        raise _to_http_error(exc) from exc


@router.get("/lesson/{lesson_id}", response_model=List[quiz_schema.QuizRead])
def list_lesson_quizzes(lesson_id: int, db: Session = Depends(get_db)):
    return QuizService(db=db).list_lesson_quizzes(lesson_id)


@router.get("/{quiz_id}", response_model=quiz_schema.QuizRead)
def get_quiz(quiz_id: int, db: Session = Depends(get_db)):
    try:
        return QuizService(db=db).get_quiz(quiz_id)
    except AppError as exc:
        raise _to_http_error(exc) from exc


@router.post(
    "/{quiz_id}/submit",
    response_model=quiz_schema.QuizAttemptRead,
    status_code=status.HTTP_201_CREATED,
    summary="Grade a submission and record the attempt",
)
def submit_quiz(
    quiz_id: int,
    payload: quiz_schema.QuizSubmission,
    db: Session = Depends(get_db),
):
    try:
        return QuizService(db=db).submit_quiz(quiz_id, payload)
    except AppError as exc:
        raise _to_http_error(exc) from exc


@router.get("/{quiz_id}/attempts", response_model=List[quiz_schema.QuizAttemptRead])
def list_quiz_attempts(
    quiz_id: int,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return QuizService(db=db).list_attempts(quiz_id, user_id=user_id)
