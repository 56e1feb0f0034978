"""Training history endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_course, get_question_store, get_training_repository
from api.models import (
    AnswerResult,
    AnswerSubmission,
    QuestionStatResponse,
    TrainingSummaryResponse,
)
from api.services.question_service import QuestionSetStore
from api.services.training_service import TrainingHistoryRepository
from api.utils import format_duration
from models import Course

router = APIRouter(prefix="/api/courses/{course_id}/training", tags=["training"])


@router.get("", response_model=TrainingSummaryResponse)
def get_training_summary(
    course: Annotated[Course, Depends(get_course)],
    repository: Annotated[TrainingHistoryRepository, Depends(get_training_repository)],
) -> TrainingSummaryResponse:
    summary = repository.summary(course.short_name)
    return TrainingSummaryResponse(
        course_id=course.short_name,
        time_spent_seconds=summary.time_spent_seconds,
        time_spent=format_duration(summary.time_spent_seconds),
        correct_answers=summary.correct_answers,
        wrong_answers=summary.wrong_answers,
        questions=[
            QuestionStatResponse.model_validate(stat)
            for stat in repository.stats(course.short_name)
        ],
    )


@router.post("/answers", response_model=AnswerResult)
def record_training_answer(
    course: Annotated[Course, Depends(get_course)],
    payload: AnswerSubmission,
    store: Annotated[QuestionSetStore, Depends(get_question_store)],
    repository: Annotated[TrainingHistoryRepository, Depends(get_training_repository)],
) -> AnswerResult:
    """Record an answered question and return whether it was correct."""
    question = next(
        (q for q in store.read(course.short_name) if q.id == payload.question_id),
        None,
    )
    if question is None:
        raise HTTPException(status_code=404, detail="Question not found")

    try:
        outcome = repository.record_answer(
            course.short_name,
            question,
            payload.selected_choice_ids,
            payload.time_spent_seconds,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return AnswerResult(
        question_id=outcome.question_id,
        is_correct=outcome.is_correct,
        correct_choice_ids=sorted(outcome.correct_choice_ids),
        times_viewed=outcome.record.times_viewed,
        times_correct=outcome.record.times_correct,
        times_incorrect=outcome.record.times_incorrect,
    )


@router.delete("")
def reset_training(
    course: Annotated[Course, Depends(get_course)],
    repository: Annotated[TrainingHistoryRepository, Depends(get_training_repository)],
) -> dict[str, object]:
    removed = repository.reset(course.short_name)
    return {"courseId": course.short_name, "removed": removed}
