from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, NewType

CourseId = NewType("CourseId", str)


@dataclass
class Choice:
    id: str
    text: str
    is_correct: bool = False


@dataclass
class ImageRef:
    path: str  # "images/<course>/<captured path>"
    url: str | None = None
    downloaded: bool = False


@dataclass
class Question:
    id: str
    text: str
    choices: List[Choice]
    is_multiple_response: bool = False
    required_selection_count: int = 1
    images: List[ImageRef] = field(default_factory=list)

    @property
    def correct_choice_ids(self) -> set[str]:
        return {choice.id for choice in self.choices if choice.is_correct}


@dataclass
class PerformanceRecord:
    times_viewed: int = 0
    times_correct: int = 0
    times_incorrect: int = 0


@dataclass
class ExamDetail:
    time_minutes: int
    question_count: int


@dataclass
class Course:
    short_name: CourseId
    full_name: str
    description: str
    company: str
    repository_url: str
    question_url: str
    url: str
    exams: Dict[str, ExamDetail] = field(default_factory=dict)
