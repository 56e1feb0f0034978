"""Adaptive ("intelligent") training order."""
from __future__ import annotations

import enum
from typing import Mapping, Sequence

from models import PerformanceRecord, Question


class PerformanceGroup(int, enum.Enum):
    """Order in which groups are presented."""

    UNSEEN = 0
    STRUGGLING = 1
    MASTERED = 2


def classify(record: PerformanceRecord | None) -> PerformanceGroup:
    if record is None:
        return PerformanceGroup.UNSEEN
    if record.times_incorrect > record.times_correct:
        return PerformanceGroup.STRUGGLING
    return PerformanceGroup.MASTERED


def reorder_questions(
    questions: Sequence[Question],
    performance_by_id: Mapping[str, PerformanceRecord],
) -> list[Question]:
    """
    Never-seen questions first, then those answered wrong more often than
    right, then the rest (ties count as mastered).

    Stable within each group; recomputed from lifetime counts on every call.
    """
    groups: dict[PerformanceGroup, list[Question]] = {group: [] for group in PerformanceGroup}
    for question in questions:
        groups[classify(performance_by_id.get(question.id))].append(question)
    return [question for group in PerformanceGroup for question in groups[group]]
