from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_db
from app.core.errors import AppError
from app.schemas.progress import course_progress_schema
from app.services.course_progress_service import CourseProgressService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.patch(
    "",
    response_model=course_progress_schema.CourseProgressResponse,
    summary="Update the progress status of a lesson",
)
def update_progress(
    payload: course_progress_schema.UpdateProgressRequest,
    db: Session = Depends(get_db),
):
    """Marking a lesson as completed requires every quiz of the lesson to be passed."""
    service = CourseProgressService(db=db)
    try:
        return service.update_progress(payload)
    except AppError as exc:
        logger.info("Progress update rejected [%s]: %s", exc.code, exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/analytics", response_model=course_progress_schema.AnalyticsResponse)
def get_analytics(db: Session = Depends(get_db)):
    return CourseProgressService(db=db).get_analytics()


@router.get(
    "/enrollment/{enrollment_id}",
    response_model=List[course_progress_schema.CourseProgressResponse],
)
def get_course_progress(enrollment_id: int, db: Session = Depends(get_db)):
    return CourseProgressService(db=db).get_course_progress(enrollment_id)


@router.get(
    "/enrollment/{enrollment_id}/completion-rate",
    response_model=course_progress_schema.CompletionRateResponse,
)
def get_completion_rate(enrollment_id: int, db: Session = Depends(get_db)):
    return CourseProgressService(db=db).get_completion_rate(enrollment_id)
