"""Service layer for training history using SQLite database."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session as DBSession

from api.models.db.training import QuestionStat, TrainingSummary
from api.utils import utc_now
from models import CourseId, PerformanceRecord, Question

logger = logging.getLogger(__name__)


@dataclass
class AnswerOutcome:
    question_id: str
    is_correct: bool
    correct_choice_ids: set[str]
    record: PerformanceRecord


class TrainingHistoryRepository:
    """
    Per-course training history.

    Question stats are keyed by (course_id, question_id); question ids are
    content hashes, so history survives a re-download of the course.
    """

    def __init__(self, db: DBSession):
        self.db = db

    def performance_for(self, course_id: CourseId) -> dict[str, PerformanceRecord]:
        rows = self.db.execute(
            select(QuestionStat).where(QuestionStat.course_id == course_id)
        ).scalars()
        return {row.question_id: row.to_record() for row in rows}

    def stats(self, course_id: CourseId) -> list[QuestionStat]:
        return list(
            self.db.execute(
                select(QuestionStat)
                .where(QuestionStat.course_id == course_id)
                .order_by(QuestionStat.question_id)
            ).scalars()
        )

    def summary(self, course_id: CourseId) -> TrainingSummary:
        """Course totals; an unsaved zeroed row when nothing was recorded yet."""
        summary = self.db.get(TrainingSummary, course_id)
        if summary is None:
            summary = TrainingSummary(
                course_id=course_id,
                time_spent_seconds=0.0,
                correct_answers=0,
                wrong_answers=0,
                updated_at=utc_now(),
            )
        return summary

    def record_answer(
        self,
        course_id: CourseId,
        question: Question,
        selected_ids: Iterable[str],
        time_spent_seconds: float = 0.0,
    ) -> AnswerOutcome:
        """
        Record one answered training question.

        The question counts as correct only when the selected set equals the
        correct set. Course totals add every selected correct choice to
        correct answers and every selected wrong choice to wrong answers.
        """
        selected = set(selected_ids)
        unknown = selected - {choice.id for choice in question.choices}
        if unknown:
            raise ValueError(f"Unknown choice ids: {sorted(unknown)}")

        correct = question.correct_choice_ids
        is_correct = selected == correct

        stat = self.db.execute(
            select(QuestionStat).where(
                QuestionStat.course_id == course_id,
                QuestionStat.question_id == question.id,
            )
        ).scalar_one_or_none()
        if stat is None:
            stat = QuestionStat(
                course_id=course_id,
                question_id=question.id,
                times_viewed=0,
                times_correct=0,
                times_incorrect=0,
            )
            self.db.add(stat)

        stat.times_viewed += 1
        if is_correct:
            stat.times_correct += 1
        else:
            stat.times_incorrect += 1
        stat.last_answered_at = utc_now()

        summary = self.db.get(TrainingSummary, course_id)
        if summary is None:
            summary = TrainingSummary(
                course_id=course_id,
                time_spent_seconds=0.0,
                correct_answers=0,
                wrong_answers=0,
            )
            self.db.add(summary)
        summary.correct_answers += len(selected & correct)
        summary.wrong_answers += len(selected - correct)
        summary.time_spent_seconds += max(0.0, float(time_spent_seconds))

        self.db.commit()
        self.db.refresh(stat)
        logger.debug(
            f"Recorded answer for {course_id}/{question.id}: correct={is_correct}"
        )
        return AnswerOutcome(
            question_id=question.id,
            is_correct=is_correct,
            correct_choice_ids=correct,
            record=stat.to_record(),
        )

    def reset(self, course_id: CourseId) -> int:
        """Delete all training history for a course. Returns removed stat rows."""
        result = self.db.execute(
            delete(QuestionStat).where(QuestionStat.course_id == course_id)
        )
        self.db.execute(
            delete(TrainingSummary).where(TrainingSummary.course_id == course_id)
        )
        self.db.commit()
        logger.info(f"Reset training history for {course_id}")
        return result.rowcount or 0
