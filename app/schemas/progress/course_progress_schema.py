"""Pydantic schemas for lesson progress tracking.

Responses are serialised in camelCase; requests accept both camelCase and
snake_case field names.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

from app.models.progress.course_progress_model import ProgressStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpdateProgressRequest(_CamelModel):
    """Requested status for one lesson of an enrollment."""

    enrollment_id: int
    lesson_id: int
    status: ProgressStatus


class CourseProgressResponse(_CamelModel):
    enrollment_id: int
    lesson_id: int
    status: ProgressStatus
    lesson_title: Optional[str] = None


class CompletionRateResponse(_CamelModel):
    enrollment_id: int
    completed: int
    total: int
    completion_rate: int


class AnalyticsResponse(_CamelModel):
    total_progress: int
    completed: int
    overall_completion_rate: float
