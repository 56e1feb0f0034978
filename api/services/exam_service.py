"""Service layer for exam simulation and stored exam results."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session as DBSession

from api.config import EXAM_PASS_PERCENT
from api.models.db.exam import ExamMode, ExamResult
from models import Course, Question

logger = logging.getLogger(__name__)


@dataclass
class ExamGrade:
    question_count: int
    correct_count: int
    passed: bool
    snapshots: list[dict[str, Any]] = field(default_factory=list)

    @property
    def percent_correct(self) -> float:
        if self.question_count == 0:
            return 0.0
        return self.correct_count / self.question_count * 100


def exam_detail_for(course: Course, mode: str):
    """Return the catalog preset for an exam mode, or raise ValueError."""
    try:
        ExamMode(mode)
    except ValueError:
        raise ValueError(f"Unknown exam mode: {mode}") from None
    detail = course.exams.get(mode)
    if detail is None:
        raise ValueError(f"Course {course.short_name} has no {mode} exam")
    return detail


def build_exam(questions: Sequence[Question], question_count: int) -> list[Question]:
    """First question_count questions of an already shuffled set."""
    return list(questions[: max(0, question_count)])


def grade_exam(
    questions: Sequence[Question],
    answers: Mapping[str, Sequence[str]],
    pass_percent: int = EXAM_PASS_PERCENT,
) -> ExamGrade:
    """
    Grade an exam submission.

    Args:
        questions: Questions that were part of the exam
        answers: Selected choice ids per question id; missing means unanswered
        pass_percent: Minimum percent correct to pass

    Returns:
        ExamGrade with per-question snapshots
    """
    by_id = {question.id: question for question in questions}
    unknown = set(answers) - set(by_id)
    if unknown:
        raise ValueError(f"Unknown question ids: {sorted(unknown)}")

    correct_count = 0
    snapshots: list[dict[str, Any]] = []
    for question in questions:
        selected = list(dict.fromkeys(answers.get(question.id, [])))
        is_correct = set(selected) == question.correct_choice_ids
        if is_correct:
            correct_count += 1
        snapshots.append({
            "questionId": question.id,
            "question": question.text,
            "choices": [
                {"id": choice.id, "text": choice.text, "isCorrect": choice.is_correct}
                for choice in question.choices
            ],
            "selectedChoices": selected,
            "isCorrect": is_correct,
        })

    total = len(questions)
    percent = correct_count / total * 100 if total else 0.0
    return ExamGrade(
        question_count=total,
        correct_count=correct_count,
        passed=total > 0 and percent >= pass_percent,
        snapshots=snapshots,
    )


class ExamRepository:
    """Stored exam results."""

    def __init__(self, db: DBSession):
        self.db = db

    def save(
        self,
        course: Course,
        mode: str,
        grade: ExamGrade,
        time_spent_seconds: int = 0,
    ) -> ExamResult:
        result = ExamResult(
            id=uuid.uuid4().hex,
            course_id=course.short_name,
            course_name=course.full_name,
            mode=mode,
            time_spent_seconds=max(0, int(time_spent_seconds)),
            question_count=grade.question_count,
            correct_count=grade.correct_count,
            passed=grade.passed,
        )
        result.questions = grade.snapshots
        self.db.add(result)
        self.db.commit()
        self.db.refresh(result)
        logger.info(
            f"Stored {mode} exam for {course.short_name}: "
            f"{grade.correct_count}/{grade.question_count} passed={grade.passed}"
        )
        return result

    def list_results(self, course_id: str | None = None) -> list[ExamResult]:
        query = select(ExamResult).order_by(ExamResult.taken_at.desc())
        if course_id:
            query = query.where(ExamResult.course_id == course_id)
        return list(self.db.execute(query).scalars())

    def get(self, exam_id: str) -> ExamResult | None:
        return self.db.get(ExamResult, exam_id)

    def delete(self, exam_id: str) -> bool:
        result = self.db.get(ExamResult, exam_id)
        if result is None:
            return False
        self.db.delete(result)
        self.db.commit()
        return True

    def reset(self) -> int:
        result = self.db.execute(delete(ExamResult))
        self.db.commit()
        return result.rowcount or 0
