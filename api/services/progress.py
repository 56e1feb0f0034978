"""Progress bookkeeping for course ingestion."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable

ProgressFn = Callable[[float, str], None]

# Stage boundaries of a single course's progress value.
MARKDOWN_FETCHED = 0.10
QUESTIONS_PARSED = 0.20
IMAGES_DONE = 0.90
COMPLETE = 1.0


class ProgressTracker:
    """
    Monotonic progress in [0, 1] for one course ingestion.

    Nothing is reported before the markdown document arrives, values never
    decrease, and 1.0 is only emitted by finish(), exactly once.
    """

    def __init__(self, course_id: str, callback: ProgressFn | None = None):
        self.course_id = course_id
        self._callback = callback
        self._value = 0.0
        self._finished = False

    @property
    def value(self) -> float:
        return self._value

    def _emit(self, value: float, status: str) -> None:
        if self._finished:
            return
        value = max(self._value, min(value, IMAGES_DONE))
        self._value = value
        if self._callback is not None:
            self._callback(value, status)

    def markdown_fetched(self) -> None:
        self._emit(MARKDOWN_FETCHED, f"Downloaded questions for {self.course_id}")

    def questions_parsed(self, question_count: int, image_count: int) -> None:
        self._emit(
            QUESTIONS_PARSED,
            f"{question_count} questions for {self.course_id}",
        )
        if image_count == 0:
            self._emit(IMAGES_DONE, f"No assets for {self.course_id}")

    def images(self, completed: int, total: int) -> None:
        if total <= 0:
            return
        span = IMAGES_DONE - QUESTIONS_PARSED
        value = QUESTIONS_PARSED + span * (completed / total)
        if completed >= total:
            value = IMAGES_DONE
        self._emit(value, f"{completed}/{total} assets for {self.course_id}")

    def finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._value = COMPLETE
        if self._callback is not None:
            self._callback(COMPLETE, f"Completed downloading {self.course_id}")


@dataclass
class BatchSnapshot:
    total: int
    completed: int
    progress: float
    failed: dict[str, str] = field(default_factory=dict)
    fractions: dict[str, float] = field(default_factory=dict)

    @property
    def done(self) -> bool:
        return self.completed + len(self.failed) >= self.total


class BatchProgress:
    """
    Aggregated progress of a multi-course download.

    This object is the only writer of the shared counters; every course
    callback goes through its lock. Overall progress is the mean of the
    per-course fractions.
    """

    def __init__(self, course_ids: list[str]):
        self._lock = threading.Lock()
        self._fractions: dict[str, float] = {course_id: 0.0 for course_id in course_ids}
        self._completed = 0
        self._failed: dict[str, str] = {}

    def update(self, course_id: str, fraction: float) -> BatchSnapshot:
        with self._lock:
            if course_id in self._fractions:
                current = self._fractions[course_id]
                self._fractions[course_id] = max(current, min(fraction, 1.0))
            return self._snapshot()

    def mark_succeeded(self, course_id: str) -> BatchSnapshot:
        with self._lock:
            self._fractions[course_id] = 1.0
            self._completed += 1
            return self._snapshot()

    def mark_failed(self, course_id: str, message: str) -> BatchSnapshot:
        with self._lock:
            self._failed[course_id] = message
            return self._snapshot()

    def snapshot(self) -> BatchSnapshot:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> BatchSnapshot:
        total = len(self._fractions)
        progress = sum(self._fractions.values()) / total if total else 1.0
        return BatchSnapshot(
            total=total,
            completed=self._completed,
            progress=progress,
            failed=dict(self._failed),
            fractions=dict(self._fractions),
        )
