"""Exam simulation endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_course, get_exam_repository, get_question_store
from api.models import ExamResultResponse, ExamStartResponse, ExamSubmission, QuestionResponse
from api.services.exam_service import (
    ExamRepository,
    build_exam,
    exam_detail_for,
    grade_exam,
)
from api.services.question_service import QuestionOrder, QuestionSetStore
from api.utils import validate_id
from models import Course

router = APIRouter(prefix="/api", tags=["exams"])


@router.get("/courses/{course_id}/exams/{mode}", response_model=ExamStartResponse)
def start_exam(
    mode: str,
    course: Annotated[Course, Depends(get_course)],
    store: Annotated[QuestionSetStore, Depends(get_question_store)],
) -> ExamStartResponse:
    """Draw a new exam for the given mode."""
    try:
        detail = exam_detail_for(course, mode)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    questions = store.load(course.short_name, QuestionOrder.SHUFFLED)
    if not questions:
        raise HTTPException(status_code=404, detail="No questions available, please download course")

    return ExamStartResponse(
        course_id=course.short_name,
        mode=mode,
        time_minutes=detail.time_minutes,
        questions=[
            QuestionResponse.from_question(question)
            for question in build_exam(questions, detail.question_count)
        ],
    )


@router.post("/courses/{course_id}/exams", response_model=ExamResultResponse, status_code=201)
def submit_exam(
    payload: ExamSubmission,
    course: Annotated[Course, Depends(get_course)],
    store: Annotated[QuestionSetStore, Depends(get_question_store)],
    repository: Annotated[ExamRepository, Depends(get_exam_repository)],
) -> ExamResultResponse:
    """Grade and store a finished exam."""
    try:
        exam_detail_for(course, payload.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    by_id = {question.id: question for question in store.read(course.short_name)}
    missing = [question_id for question_id in payload.question_ids if question_id not in by_id]
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown question ids: {missing}")

    questions = [by_id[question_id] for question_id in dict.fromkeys(payload.question_ids)]
    try:
        grade = grade_exam(questions, payload.answers)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    result = repository.save(course, payload.mode, grade, payload.time_spent_seconds)
    return ExamResultResponse.model_validate(result)


@router.get("/exams", response_model=list[ExamResultResponse])
def list_exams(
    repository: Annotated[ExamRepository, Depends(get_exam_repository)],
    course_id: str | None = Query(None, alias="courseId"),
) -> list[ExamResultResponse]:
    results = repository.list_results(course_id)
    return [ExamResultResponse.model_validate(result) for result in results]


@router.get("/exams/{exam_id}", response_model=ExamResultResponse)
def get_exam(
    exam_id: str,
    repository: Annotated[ExamRepository, Depends(get_exam_repository)],
) -> ExamResultResponse:
    result = repository.get(validate_id("examId", exam_id))
    if result is None:
        raise HTTPException(status_code=404, detail="Exam not found")
    return ExamResultResponse.model_validate(result)


@router.delete("/exams/{exam_id}")
def delete_exam(
    exam_id: str,
    repository: Annotated[ExamRepository, Depends(get_exam_repository)],
) -> dict[str, str]:
    if not repository.delete(validate_id("examId", exam_id)):
        raise HTTPException(status_code=404, detail="Exam not found")
    return {"status": "deleted", "examId": exam_id}


@router.delete("/exams")
def reset_exams(
    repository: Annotated[ExamRepository, Depends(get_exam_repository)],
) -> dict[str, int]:
    return {"removed": repository.reset()}
