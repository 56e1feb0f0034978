"""
Exam result model for simulated exams.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from api.database import Base


class ExamMode(str, enum.Enum):
    """Exam length presets defined per course in the catalog."""

    QUICK = "quick"
    INTERMEDIATE = "intermediate"
    REAL = "real"


class ExamResult(Base):
    """
    One finished exam.
    Stores a snapshot of every question so results stay readable after the
    course is re-downloaded.
    """

    __tablename__ = "exam_results"

    # Primary key - UUID hex
    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)

    course_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)

    taken_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    time_spent_seconds: Mapped[int] = mapped_column(default=0, nullable=False)

    question_count: Mapped[int] = mapped_column(default=0, nullable=False)
    correct_count: Mapped[int] = mapped_column(default=0, nullable=False)
    passed: Mapped[bool] = mapped_column(default=False, nullable=False)

    # Question snapshots (stored as JSON string)
    questions_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def questions(self) -> list[dict[str, Any]]:
        """Parse question snapshots from JSON."""
        if not self.questions_json:
            return []
        try:
            return json.loads(self.questions_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @questions.setter
    def questions(self, value: list[dict[str, Any]] | None) -> None:
        """Serialize question snapshots to JSON."""
        self.questions_json = json.dumps(value, ensure_ascii=False) if value else None

    @property
    def percent_correct(self) -> float:
        """Calculate percentage of correct answers."""
        if self.question_count == 0:
            return 0.0
        return (self.correct_count / self.question_count) * 100
