"""Utility helpers for test factories."""

from __future__ import annotations

from datetime import datetime, timedelta

from app.models.course.course_model import Course, CourseModule, Lesson
from app.models.course.enrollment_model import Enrollment
from app.models.quiz.quiz_model import Answer, Question, QuestionType, Quiz, QuizAttempt
from app.models.user.user_model import User


def create_user(db, **kwargs) -> User:
    defaults = {
        "username": "user",
        "email": "user@example.com",
        "is_active": True,
        "created_at": datetime.utcnow(),
    }
    defaults.update(kwargs)
    user = User(**defaults)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_lesson(db, *, title: str = "Lesson 1", course: Course | None = None) -> Lesson:
    if course is None:
        course = Course(title="Test Course")
        course.modules.append(CourseModule(title="Module 1", position=1))
        db.add(course)
        db.flush()

    module = course.modules[0]
    lesson = Lesson(title=title, position=len(module.lessons) + 1)
    module.lessons.append(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


def create_enrollment(db, user: User, lesson: Lesson) -> Enrollment:
    enrollment = Enrollment(user_id=user.id, course_id=lesson.module.course_id)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


def create_quiz(db, lesson: Lesson, *, title: str = "Quiz", passing_score: int = 70) -> Quiz:
    """A two-question quiz: one unique-choice question and one text question."""
    quiz = Quiz(lesson_id=lesson.id, title=title, passing_score=passing_score)

    unique = Question(text="2 + 2 ?", type=QuestionType.UNIQUE, position=1)
    unique.answers.extend([Answer(text="4", correct=True), Answer(text="5", correct=False)])

    text = Question(text="Capital of France?", type=QuestionType.TEXT, position=2)
    text.answers.append(Answer(text="Paris", correct=True))

    quiz.questions.extend([unique, text])
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    return quiz


def create_attempt(db, user: User, quiz: Quiz, *, passed: bool, minutes_ago: int = 0) -> QuizAttempt:
    attempt = QuizAttempt(
        user_id=user.id,
        quiz_id=quiz.id,
        score=100 if passed else 0,
        passed=passed,
        created_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt
