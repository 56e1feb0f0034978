"""Service layer for the course catalog and favorites."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from api.config import COURSE_CATALOG_PATH
from api.models.db.favorite import FavoriteCourse
from api.utils import data_root, question_set_path, read_json_file
from models import Course, CourseId, ExamDetail

logger = logging.getLogger(__name__)


def course_from_dict(item: dict) -> Course:
    exams = {
        mode: ExamDetail(
            time_minutes=int(detail["time_minutes"]),
            question_count=int(detail["question_count"]),
        )
        for mode, detail in (item.get("exams") or {}).items()
    }
    return Course(
        short_name=CourseId(item["short_name"]),
        full_name=item["full_name"],
        description=item.get("description", ""),
        company=item.get("company", ""),
        repository_url=item["repository_url"],
        question_url=item["question_url"],
        url=item.get("url", ""),
        exams=exams,
    )


class CourseCatalog:
    """Fixed list of supported certifications, keyed by short name."""

    def __init__(self, courses: Iterable[Course]):
        self._courses: dict[str, Course] = {}
        for course in courses:
            if course.short_name in self._courses:
                raise ValueError(f"Duplicate course id: {course.short_name}")
            self._courses[course.short_name] = course

    @classmethod
    def from_file(cls, path: Path | None = None) -> "CourseCatalog":
        path = Path(path) if path is not None else COURSE_CATALOG_PATH
        payload = read_json_file(path, None)
        if not isinstance(payload, list):
            raise ValueError(f"Course catalog must be a list: {path}")
        courses = [course_from_dict(item) for item in payload if isinstance(item, dict)]
        logger.info(f"Loaded {len(courses)} courses from {path}")
        return cls(courses)

    def get(self, course_id: str) -> Course | None:
        return self._courses.get(course_id)

    def all(self) -> list[Course]:
        return list(self._courses.values())

    def __contains__(self, course_id: object) -> bool:
        return course_id in self._courses

    def __len__(self) -> int:
        return len(self._courses)


def get_course_or_404(catalog: CourseCatalog, course_id: str) -> Course:
    course = catalog.get(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def is_downloaded(course_id: str, data_dir: Path | None = None) -> bool:
    """A course counts as downloaded once its question set file exists."""
    return question_set_path(course_id, data_root(data_dir)).exists()


class FavoritesRepository:
    """Persisted set of favorite course ids."""

    def __init__(self, db: DBSession):
        self.db = db

    def ids(self) -> set[str]:
        return set(self.db.execute(select(FavoriteCourse.course_id)).scalars())

    def contains(self, course_id: str) -> bool:
        return self.db.get(FavoriteCourse, course_id) is not None

    def add(self, course_id: str) -> bool:
        """Mark as favorite. Returns False when it already was one."""
        if self.contains(course_id):
            return False
        self.db.add(FavoriteCourse(course_id=course_id))
        self.db.commit()
        return True

    def remove(self, course_id: str) -> bool:
        favorite = self.db.get(FavoriteCourse, course_id)
        if favorite is None:
            return False
        self.db.delete(favorite)
        self.db.commit()
        return True

    def courses(self, catalog: CourseCatalog) -> list[Course]:
        """Favorite courses in catalog order; ids no longer in the catalog are skipped."""
        favorite_ids = self.ids()
        return [course for course in catalog.all() if course.short_name in favorite_ids]
