"""Shared test helpers: fake requests sessions and catalog entries."""
import threading
from typing import Callable

import requests

from models import Course, CourseId, ExamDetail


class FakeResponse:
    def __init__(self, url: str, body: bytes = b"", status_code: int = 200, chunk_size: int | None = None):
        self.url = url
        self.body = body
        self.status_code = status_code
        self.chunk_size = chunk_size
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)

    def iter_content(self, chunk_size: int = 1):
        size = self.chunk_size or chunk_size
        for start in range(0, len(self.body), size):
            yield self.body[start:start + size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """
    Serves bodies from a url -> bytes map. Unknown URLs answer 404; an
    exception value is raised from get().
    """

    def __init__(
        self,
        routes: dict[str, object],
        before_get: Callable[[str], None] | None = None,
        chunk_size: int | None = None,
    ):
        self.routes = dict(routes)
        self.before_get = before_get
        self.chunk_size = chunk_size
        self.calls: list[str] = []
        self.timeouts: list[float | None] = []
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url: str, stream: bool = False, timeout: float | None = None) -> FakeResponse:
        with self._lock:
            self.calls.append(url)
            self.timeouts.append(timeout)
        if self.before_get is not None:
            self.before_get(url)
        value = self.routes.get(url)
        if value is None:
            return FakeResponse(url, b"", status_code=404)
        if isinstance(value, Exception):
            raise value
        return FakeResponse(url, value, chunk_size=self.chunk_size)

    def close(self) -> None:
        self.closed = True


REPOSITORY_URL = "https://github.com/org/saa-questions"
QUESTION_URL = "https://raw.githubusercontent.com/org/saa-questions/main/README.md"
RAW_BASE = "https://raw.githubusercontent.com/org/saa-questions/main/"


def make_course(short_name: str = "SAA-C03", **overrides) -> Course:
    values = dict(
        short_name=CourseId(short_name),
        full_name="Certified Solutions Architect - Associate",
        description="Architecture on AWS",
        company="Amazon Web Services",
        repository_url=REPOSITORY_URL,
        question_url=QUESTION_URL,
        url="https://aws.amazon.com/certification/",
        exams={
            "quick": ExamDetail(time_minutes=5, question_count=2),
            "intermediate": ExamDetail(time_minutes=10, question_count=3),
            "real": ExamDetail(time_minutes=20, question_count=10),
        },
    )
    values.update(overrides)
    return Course(**values)
