"""Pydantic schemas for quiz creation, reading and submission."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.quiz.quiz_model import QuestionType


class AnswerCreate(BaseModel):
    text: str
    correct: bool = False


class QuestionCreate(BaseModel):
    text: str
    # Left as a plain string so unknown types reach the structural validator.
    type: str
    answers: Optional[List[AnswerCreate]] = Field(default_factory=list)


class QuizCreate(BaseModel):
    lesson_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=200)
    passing_score: Optional[int] = Field(default=None, ge=0, le=100)
    questions: Optional[List[QuestionCreate]] = Field(default_factory=list)


class AnswerRead(BaseModel):
    """Answers as shown to learners: the ``correct`` flag is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str


class QuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    type: QuestionType
    position: int
    answers: List[AnswerRead]


class QuizRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lesson_id: int
    title: str
    passing_score: int
    questions: List[QuestionRead]


class QuestionResponse(BaseModel):
    question_id: int
    selected_answer_id: Optional[int] = None
    selected_answer_ids: Optional[List[int]] = None
    text_response: Optional[str] = None


class QuizSubmission(BaseModel):
    user_id: int
    responses: List[QuestionResponse] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ensure_unique_question(self) -> "QuizSubmission":
        seen: set[int] = set()
        for response in self.responses:
            if response.question_id in seen:
                raise ValueError("duplicate_question_response")
            seen.add(response.question_id)
        return self


class QuizAttemptRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    quiz_id: int
    score: int
    passed: bool
    created_at: Optional[datetime] = None
