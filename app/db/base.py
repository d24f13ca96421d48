"""Imports every SQLAlchemy model so ``Base.metadata`` knows all tables."""

from app.db.base_class import Base

# Users
from app.models.user.user_model import User

# Catalogue & enrollments
from app.models.course.course_model import Category, Course, CourseModule, Lesson
from app.models.course.enrollment_model import Enrollment

# Quiz
from app.models.quiz.quiz_model import Answer, Question, Quiz, QuizAttempt

# Progress
from app.models.progress.course_progress_model import CourseProgress

__all__ = (
    "Base",
    "User",
    "Category",
    "Course",
    "CourseModule",
    "Lesson",
    "Enrollment",
    "Quiz",
    "Question",
    "Answer",
    "QuizAttempt",
    "CourseProgress",
)
