"""Background execution of course ingestions.

At most one ingestion per course is in flight. A new request for a course
that is still running cancels the running one and starts over; a per-course
lock makes the new run wait until the old one has let go of the course's
files.
"""
from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable

from api.config import MAX_CONCURRENT_INGESTIONS
from api.services.ingestion_service import CourseIngestionPipeline, IngestionResult
from api.services.progress import BatchProgress, BatchSnapshot, ProgressFn
from errors import IngestionCancelled, IngestionError
from image_fetch import check_cancelled
from models import Course, CourseId

logger = logging.getLogger(__name__)

CompleteFn = Callable[[IngestionResult], None]
BatchProgressFn = Callable[[BatchSnapshot], None]


class IngestionState(str, enum.Enum):
    """Lifecycle of one ingestion request."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = {IngestionState.SUCCEEDED, IngestionState.FAILED, IngestionState.CANCELLED}


class IngestionHandle:
    """Caller-side view of one ingestion request."""

    def __init__(self, course: Course):
        self.course = course
        self.cancel_event = threading.Event()
        self._finished = threading.Event()
        self._lock = threading.Lock()
        self.state = IngestionState.PENDING
        self.progress = 0.0
        self.status_message = ""
        self.result: IngestionResult | None = None

    @property
    def course_id(self) -> CourseId:
        return self.course.short_name

    def done(self) -> bool:
        return self._finished.is_set()

    def cancel(self) -> bool:
        """Request cancellation. Returns False if the run already finished."""
        if self.done():
            return False
        self.cancel_event.set()
        return True

    def wait(self, timeout: float | None = None) -> IngestionResult | None:
        """Block until finished; None on timeout."""
        if not self._finished.wait(timeout):
            return None
        return self.result

    def _set_running(self) -> None:
        with self._lock:
            self.state = IngestionState.RUNNING

    def _update(self, fraction: float, message: str) -> None:
        with self._lock:
            self.progress = fraction
            self.status_message = message

    def _finish(self, result: IngestionResult, state: IngestionState) -> None:
        with self._lock:
            self.result = result
            self.state = state
            if result.succeeded:
                self.progress = 1.0
                self.status_message = result.message
            else:
                self.status_message = str(result.error) if result.error else result.message
        self._finished.set()

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            result = self.result
            return {
                "course_id": self.course_id,
                "state": self.state.value,
                "progress": self.progress,
                "message": self.status_message,
                "error": str(result.error) if result and result.error else None,
                "question_count": result.question_count if result and result.succeeded else None,
                "image_count": result.image_count if result and result.succeeded else None,
            }


class BatchIngestion:
    """A group of course ingestions started together."""

    def __init__(self, progress: BatchProgress):
        self.progress = progress
        self.handles: dict[CourseId, IngestionHandle] = {}

    def done(self) -> bool:
        return all(handle.done() for handle in self.handles.values())

    def cancel(self) -> int:
        return sum(1 for handle in self.handles.values() if handle.cancel())

    def wait(self, timeout: float | None = None) -> bool:
        for handle in self.handles.values():
            if handle.wait(timeout) is None and not handle.done():
                return False
        return True

    def snapshot(self) -> BatchSnapshot:
        return self.progress.snapshot()


class IngestionManager:
    """Thread-pool front end for CourseIngestionPipeline."""

    def __init__(
        self,
        pipeline: CourseIngestionPipeline,
        max_workers: int = MAX_CONCURRENT_INGESTIONS,
    ):
        self.pipeline = pipeline
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ingest")
        self._lock = threading.Lock()
        self._handles: dict[CourseId, IngestionHandle] = {}
        self._course_locks: dict[CourseId, threading.Lock] = {}
        self._closed = False

    def ingest(
        self,
        course: Course,
        on_progress: ProgressFn | None = None,
        on_complete: CompleteFn | None = None,
    ) -> IngestionHandle:
        """Start ingesting a course in the background and return immediately."""
        course_id = course.short_name
        with self._lock:
            if self._closed:
                raise RuntimeError("Ingestion manager is shut down")
            previous = self._handles.get(course_id)
            if previous is not None and previous.cancel():
                logger.info(f"Restarting download of {course_id}; previous run cancelled")
            handle = IngestionHandle(course)
            self._handles[course_id] = handle
            course_lock = self._course_locks.setdefault(course_id, threading.Lock())
            self._executor.submit(self._run, handle, course_lock, on_progress, on_complete)
        return handle

    def ingest_many(
        self,
        courses: Iterable[Course],
        on_progress: BatchProgressFn | None = None,
        on_complete: CompleteFn | None = None,
    ) -> BatchIngestion:
        """
        Start several courses concurrently.

        A failure only affects its own course; siblings keep running.
        """
        unique: dict[CourseId, Course] = {}
        for course in courses:
            unique.setdefault(course.short_name, course)

        batch = BatchIngestion(BatchProgress(list(unique)))

        def progress_for(course_id: CourseId) -> ProgressFn:
            def _progress(fraction: float, _message: str) -> None:
                snapshot = batch.progress.update(course_id, fraction)
                if on_progress is not None:
                    on_progress(snapshot)
            return _progress

        def _complete(result: IngestionResult) -> None:
            if result.succeeded:
                snapshot = batch.progress.mark_succeeded(result.course_id)
            else:
                snapshot = batch.progress.mark_failed(result.course_id, str(result.error))
            if on_complete is not None:
                on_complete(result)
            if on_progress is not None:
                on_progress(snapshot)

        for course_id, course in unique.items():
            batch.handles[course_id] = self.ingest(
                course, on_progress=progress_for(course_id), on_complete=_complete
            )
        return batch

    def cancel(self, course_id: CourseId | str) -> bool:
        """Cancel the in-flight ingestion of a course, if any."""
        with self._lock:
            handle = self._handles.get(CourseId(course_id))
        if handle is None:
            return False
        cancelled = handle.cancel()
        if cancelled:
            logger.info(f"Download of {course_id} cancelled")
        return cancelled

    def status(self, course_id: CourseId | str) -> IngestionHandle | None:
        """Latest handle for a course (running or finished)."""
        with self._lock:
            return self._handles.get(CourseId(course_id))

    def is_running(self, course_id: CourseId | str) -> bool:
        handle = self.status(course_id)
        return handle is not None and not handle.done()

    def shutdown(self, wait: bool = True) -> None:
        """Cancel everything in flight and stop the worker threads."""
        with self._lock:
            self._closed = True
            handles = list(self._handles.values())
        for handle in handles:
            handle.cancel()
        self._executor.shutdown(wait=wait)

    def _run(
        self,
        handle: IngestionHandle,
        course_lock: threading.Lock,
        on_progress: ProgressFn | None,
        on_complete: CompleteFn | None,
    ) -> IngestionResult:
        course_id = handle.course_id

        def _progress(fraction: float, message: str) -> None:
            handle._update(fraction, message)
            if on_progress is not None:
                on_progress(fraction, message)

        with course_lock:
            handle._set_running()
            try:
                check_cancelled(course_id, handle.cancel_event)
                result = self.pipeline.run(
                    handle.course, on_progress=_progress, cancel_event=handle.cancel_event
                )
                state = IngestionState.SUCCEEDED
            except IngestionCancelled as exc:
                result = IngestionResult(course_id=course_id, succeeded=False, error=exc)
                state = IngestionState.CANCELLED
            except IngestionError as exc:
                logger.error(f"Failed to download {course_id}: {exc.message}")
                result = IngestionResult(course_id=course_id, succeeded=False, error=exc)
                state = IngestionState.FAILED
            except Exception as exc:
                logger.exception(f"Unexpected failure downloading {course_id}")
                result = IngestionResult(
                    course_id=course_id,
                    succeeded=False,
                    error=IngestionError(course_id, str(exc) or exc.__class__.__name__),
                )
                state = IngestionState.FAILED

        # Callback first so waiters observe its effects.
        if on_complete is not None:
            try:
                on_complete(result)
            except Exception:
                logger.exception(f"Completion callback for {course_id} raised")
        handle._finish(result, state)
        return result
