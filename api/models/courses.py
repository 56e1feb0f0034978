"""Course catalog Pydantic models."""
from pydantic import BaseModel

from models import Course


class ExamDetailResponse(BaseModel):
    """Time limit and length of one exam mode."""

    time_minutes: int
    question_count: int


class CourseResponse(BaseModel):
    """Catalog entry with local state."""

    short_name: str
    full_name: str
    description: str
    company: str
    repository_url: str
    question_url: str
    url: str
    exams: dict[str, ExamDetailResponse]
    is_favorite: bool = False
    is_downloaded: bool = False

    @classmethod
    def from_course(
        cls, course: Course, is_favorite: bool = False, is_downloaded: bool = False
    ) -> "CourseResponse":
        return cls(
            short_name=course.short_name,
            full_name=course.full_name,
            description=course.description,
            company=course.company,
            repository_url=course.repository_url,
            question_url=course.question_url,
            url=course.url,
            exams={
                mode: ExamDetailResponse(
                    time_minutes=detail.time_minutes,
                    question_count=detail.question_count,
                )
                for mode, detail in course.exams.items()
            },
            is_favorite=is_favorite,
            is_downloaded=is_downloaded,
        )


class FavoriteResponse(BaseModel):
    course_id: str
    is_favorite: bool


class DownloadStatus(BaseModel):
    """Snapshot of one course ingestion."""

    course_id: str
    state: str
    progress: float
    message: str = ""
    error: str | None = None
    question_count: int | None = None
    image_count: int | None = None


class BatchDownloadStatus(BaseModel):
    """Aggregated progress of a multi-course download."""

    total: int
    completed: int
    failed: dict[str, str]
    progress: float
    done: bool
    courses: list[DownloadStatus]
