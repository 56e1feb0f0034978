"""Service layer for persisted question sets."""
from __future__ import annotations

import enum
import logging
import random
from pathlib import Path
from typing import Mapping, Protocol

from api.services.reorder_service import reorder_questions
from api.utils import data_root, question_set_path, read_json_file
from models import CourseId, PerformanceRecord, Question
from serialization import deserialize_question_set

logger = logging.getLogger(__name__)


class QuestionOrder(str, enum.Enum):
    """How a loaded question set is ordered for a session."""

    SHUFFLED = "shuffled"
    ADAPTIVE = "adaptive"


class PerformanceSource(Protocol):
    def performance_for(self, course_id: CourseId) -> Mapping[str, PerformanceRecord]: ...


class QuestionSetStore:
    """Reads question sets written by the ingestion pipeline. Never writes."""

    def __init__(
        self,
        history: PerformanceSource | None = None,
        data_dir: Path | None = None,
        rng: random.Random | None = None,
    ):
        self.history = history
        self.data_dir = data_root(data_dir)
        self._rng = rng or random.Random()

    def exists(self, course_id: CourseId) -> bool:
        return question_set_path(course_id, self.data_dir).exists()

    def read(self, course_id: CourseId) -> list[Question]:
        """Questions in file order; empty when the course is not downloaded."""
        path = question_set_path(course_id, self.data_dir)
        try:
            payload = read_json_file(path, None)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading questions for {course_id}: {e}")
            return []
        if payload is None:
            logger.debug(f"No question set for {course_id} at {path}")
            return []
        try:
            return deserialize_question_set(payload)
        except ValueError as e:
            logger.error(f"Invalid question set for {course_id}: {e}")
            return []

    def load(self, course_id: CourseId, mode: QuestionOrder = QuestionOrder.SHUFFLED) -> list[Question]:
        """
        Load questions for a training or exam session.

        Args:
            course_id: Course short name
            mode: Uniform shuffle, or adaptive order from training history

        Returns:
            Ordered questions (empty if the course was never downloaded)
        """
        questions = self.read(course_id)
        if not questions:
            return questions
        if mode == QuestionOrder.ADAPTIVE:
            performance = self.history.performance_for(course_id) if self.history else {}
            return reorder_questions(questions, performance)
        self._rng.shuffle(questions)
        return questions
