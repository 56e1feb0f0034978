"""Training Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field


class AnswerSubmission(BaseModel):
    """One answered training question."""

    question_id: str = Field(..., min_length=1)
    selected_choice_ids: list[str]
    time_spent_seconds: float = Field(0.0, ge=0)


class QuestionStatResponse(BaseModel):
    question_id: str
    times_viewed: int
    times_correct: int
    times_incorrect: int
    last_answered_at: datetime

    class Config:
        from_attributes = True


class AnswerResult(BaseModel):
    question_id: str
    is_correct: bool
    correct_choice_ids: list[str]
    times_viewed: int
    times_correct: int
    times_incorrect: int


class TrainingSummaryResponse(BaseModel):
    """Course training totals and per-question stats."""

    course_id: str
    time_spent_seconds: float
    time_spent: str
    correct_answers: int
    wrong_answers: int
    questions: list[QuestionStatResponse]
