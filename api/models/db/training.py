"""
Training history models: per-question stats and per-course totals.
"""

from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from api.database import Base
from models import PerformanceRecord


class QuestionStat(Base):
    """
    Lifetime answer counts for one question of one course.
    Keyed by the content-derived question id, so it survives re-downloads.
    """

    __tablename__ = "question_stats"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    course_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    question_id: Mapped[str] = mapped_column(String(64), nullable=False)

    times_viewed: Mapped[int] = mapped_column(default=0, nullable=False)
    times_correct: Mapped[int] = mapped_column(default=0, nullable=False)
    times_incorrect: Mapped[int] = mapped_column(default=0, nullable=False)
    last_answered_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("course_id", "question_id", name="uq_course_question"),
    )

    def to_record(self) -> PerformanceRecord:
        return PerformanceRecord(
            times_viewed=self.times_viewed,
            times_correct=self.times_correct,
            times_incorrect=self.times_incorrect,
        )


class TrainingSummary(Base):
    """Per-course training totals."""

    __tablename__ = "training_summaries"

    course_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    time_spent_seconds: Mapped[float] = mapped_column(default=0.0, nullable=False)
    correct_answers: Mapped[int] = mapped_column(default=0, nullable=False)
    wrong_answers: Mapped[int] = mapped_column(default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
