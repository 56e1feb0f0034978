"""Course ingestion pipeline: markdown -> questions -> images -> JSON."""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import requests

from api.config import HTTP_TIMEOUT_SECONDS, USER_AGENT
from api.services.progress import ProgressFn, ProgressTracker
from api.utils import (
    atomic_write_bytes,
    course_images_dir,
    data_root,
    markdown_cache_path,
    merge_tree,
    question_set_path,
    remove_tree,
    staging_root,
    write_json_file,
)
from errors import IngestionError, ParseError, StorageError
from image_fetch import (
    check_cancelled,
    count_images,
    download_bytes,
    fetch_images,
    new_session,
    validate_url,
)
from markdown_extract import MarkdownQuestionExtractor
from models import Course, CourseId
from serialization import serialize_question_set

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


@dataclass
class IngestionResult:
    """Outcome of one course ingestion."""

    course_id: CourseId
    succeeded: bool
    question_count: int = 0
    image_count: int = 0
    error: IngestionError | None = None

    @property
    def message(self) -> str:
        if self.succeeded:
            return f"Downloaded course: {self.course_id}"
        return f"Failed to download {self.course_id}: {self.error.message if self.error else 'unknown error'}"


class CourseIngestionPipeline:
    """
    Runs the ingestion steps for one course, synchronously, in order.

    The persisted question set is only replaced after every step succeeded,
    so a failed or cancelled run leaves the previous file untouched.
    """

    def __init__(
        self,
        data_dir: Path | None = None,
        session_factory: SessionFactory | None = None,
        timeout: float | None = HTTP_TIMEOUT_SECONDS,
        user_agent: str | None = USER_AGENT,
    ):
        self.data_dir = data_root(data_dir)
        self.timeout = timeout
        self._session_factory = session_factory or (lambda: new_session(user_agent))

    def run(
        self,
        course: Course,
        on_progress: ProgressFn | None = None,
        cancel_event: threading.Event | None = None,
    ) -> IngestionResult:
        """
        Ingest one course.

        Args:
            course: Catalog entry to download
            on_progress: Called with (fraction, status message)
            cancel_event: Set from another thread to abort the run

        Returns:
            Successful IngestionResult

        Raises:
            IngestionError: Any typed failure (URL, network, parse, storage, cancel)
        """
        course_id = course.short_name
        question_url = validate_url(course.question_url, course_id, "question URL")
        tracker = ProgressTracker(course_id, on_progress)
        staging = staging_root(self.data_dir) / f"{course_id}-{uuid.uuid4().hex[:8]}"
        session = self._session_factory()

        logger.info(f"Starting ingestion for {course_id} from {question_url}")
        try:
            raw = download_bytes(session, question_url, course_id, self.timeout, cancel_event)
            tracker.markdown_fetched()

            self._write(course_id, markdown_cache_path(course_id, self.data_dir), raw)

            try:
                markdown = raw.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise ParseError(course_id, f"Markdown is not valid UTF-8: {exc}") from exc

            extractor = MarkdownQuestionExtractor(course_id)
            questions = extractor.extract(markdown)
            for entry in extractor.logs:
                logger.debug(f"{course_id}: {entry}")
            image_count = count_images(questions)
            tracker.questions_parsed(len(questions), image_count)

            questions = fetch_images(
                questions,
                course.repository_url,
                course_id,
                staging,
                on_progress=tracker.images,
                session=session,
                timeout=self.timeout,
                cancel_event=cancel_event,
            )

            check_cancelled(course_id, cancel_event)
            self._publish(course_id, staging, serialize_question_set(questions))
            tracker.finish()
        finally:
            remove_tree(staging)
            session.close()

        logger.info(f"Downloaded course: {course_id} ({len(questions)} questions, {image_count} images)")
        return IngestionResult(
            course_id=course_id,
            succeeded=True,
            question_count=len(questions),
            image_count=image_count,
        )

    def _write(self, course_id: str, path: Path, data: bytes) -> None:
        try:
            atomic_write_bytes(path, data)
        except OSError as exc:
            raise StorageError(course_id, f"Cannot write {path}: {exc}") from exc

    def _publish(self, course_id: str, staging: Path, payload: list[dict[str, object]]) -> None:
        """Move staged images into place, then atomically replace the JSON."""
        staged_images = staging / "images" / course_id
        target_json = question_set_path(course_id, self.data_dir)
        try:
            if staged_images.exists():
                merge_tree(staged_images, course_images_dir(course_id, self.data_dir))
            write_json_file(target_json, payload)
        except OSError as exc:
            raise StorageError(course_id, f"Cannot persist question set: {exc}") from exc
