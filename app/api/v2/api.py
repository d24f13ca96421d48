from fastapi import APIRouter
from .endpoints import (
    quiz_router,
    course_progress_router,
)

api_router = APIRouter()

api_router.include_router(quiz_router.router, prefix="/quizzes", tags=["Quizzes"])
api_router.include_router(course_progress_router.router, prefix="/course-progress", tags=["Course Progress"])
