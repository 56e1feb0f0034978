"""Exam Pydantic models."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from api.models.questions import QuestionResponse


class ExamStartResponse(BaseModel):
    """Questions and time limit for a new exam."""

    course_id: str
    mode: str
    time_minutes: int
    questions: list[QuestionResponse]


class ExamSubmission(BaseModel):
    """Finished exam: every question shown plus the selected choice ids."""

    mode: str = Field(..., min_length=1)
    question_ids: list[str] = Field(..., min_length=1)
    answers: dict[str, list[str]] = {}
    time_spent_seconds: int = Field(0, ge=0)


class ExamResultResponse(BaseModel):
    """Stored exam result."""

    id: str
    course_id: str
    course_name: str
    mode: str
    taken_at: datetime
    time_spent_seconds: int
    question_count: int
    correct_count: int
    percent_correct: float
    passed: bool
    questions: list[dict[str, Any]] = []

    class Config:
        from_attributes = True
