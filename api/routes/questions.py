"""Question loading endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_course, get_question_store
from api.models import QuestionResponse
from api.services.question_service import QuestionOrder, QuestionSetStore
from models import Course

router = APIRouter(prefix="/api/courses/{course_id}/questions", tags=["questions"])


@router.get("", response_model=list[QuestionResponse])
def list_questions(
    course: Annotated[Course, Depends(get_course)],
    store: Annotated[QuestionSetStore, Depends(get_question_store)],
    mode: QuestionOrder = QuestionOrder.SHUFFLED,
) -> list[QuestionResponse]:
    """Questions for a session, shuffled or in adaptive order."""
    if not store.exists(course.short_name):
        raise HTTPException(status_code=404, detail="Course not downloaded")
    questions = store.load(course.short_name, mode)
    return [QuestionResponse.from_question(question) for question in questions]
