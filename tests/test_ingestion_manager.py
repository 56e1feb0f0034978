import threading
from pathlib import Path

import pytest

from api.services.ingestion_manager import IngestionManager, IngestionState
from api.services.ingestion_service import CourseIngestionPipeline, IngestionResult
from errors import NetworkError
from helpers import FakeSession, make_course
from image_fetch import check_cancelled

MARKDOWN = b"### Q\n- [x] yes\n- [ ] no\n"


class BlockingPipeline:
    """First run blocks until cancelled or released; later runs succeed at once."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.runs: list[str] = []
        self._lock = threading.Lock()

    def run(self, course, on_progress=None, cancel_event=None) -> IngestionResult:
        with self._lock:
            self.runs.append(course.short_name)
            first = len(self.runs) == 1
        if first:
            self.started.set()
            while not self.release.wait(0.01):
                check_cancelled(course.short_name, cancel_event)
        if on_progress is not None:
            on_progress(1.0, "done")
        return IngestionResult(course_id=course.short_name, succeeded=True, question_count=1)


def test_second_request_cancels_and_restarts() -> None:
    pipeline = BlockingPipeline()
    manager = IngestionManager(pipeline, max_workers=2)
    course = make_course()
    try:
        first = manager.ingest(course)
        assert pipeline.started.wait(5)
        second = manager.ingest(course)

        assert second.wait(5) is not None
        assert first.wait(5) is not None
        assert first.state == IngestionState.CANCELLED
        assert second.state == IngestionState.SUCCEEDED
        assert manager.status("SAA-C03") is second
        assert pipeline.runs == ["SAA-C03", "SAA-C03"]
    finally:
        pipeline.release.set()
        manager.shutdown()


def test_cancel_reports_cancelled_state() -> None:
    pipeline = BlockingPipeline()
    manager = IngestionManager(pipeline, max_workers=1)
    try:
        handle = manager.ingest(make_course())
        assert pipeline.started.wait(5)
        assert manager.is_running("SAA-C03")
        assert manager.cancel("SAA-C03") is True

        result = handle.wait(5)
        assert result is not None and not result.succeeded
        snapshot = handle.snapshot()
        assert snapshot["state"] == "cancelled"
        assert snapshot["error"].startswith("SAA-C03")
        assert manager.cancel("SAA-C03") is False
    finally:
        pipeline.release.set()
        manager.shutdown()


def test_batch_isolates_failures_and_averages_progress(tmp_path: Path) -> None:
    good = make_course("GOOD-1", question_url="https://example.com/good.md")
    bad = make_course("BAD-1", question_url="https://example.com/bad.md")
    session = FakeSession({"https://example.com/good.md": MARKDOWN})
    pipeline = CourseIngestionPipeline(data_dir=tmp_path, session_factory=lambda: session)
    manager = IngestionManager(pipeline, max_workers=2)

    results: list[IngestionResult] = []
    snapshots = []
    try:
        batch = manager.ingest_many(
            [good, bad, good],
            on_progress=snapshots.append,
            on_complete=results.append,
        )
        assert batch.wait(5)
    finally:
        manager.shutdown()

    assert sorted(batch.handles) == ["BAD-1", "GOOD-1"]
    snapshot = batch.snapshot()
    assert snapshot.done
    assert snapshot.completed == 1
    assert list(snapshot.failed) == ["BAD-1"]
    assert snapshot.progress == pytest.approx(0.5)
    assert (tmp_path / "courses" / "GOOD-1.json").exists()

    by_course = {result.course_id: result for result in results}
    assert by_course["GOOD-1"].succeeded
    assert isinstance(by_course["BAD-1"].error, NetworkError)
    assert "BAD-1" in by_course["BAD-1"].message
    assert any(s.done for s in snapshots)


def test_shutdown_rejects_new_work() -> None:
    manager = IngestionManager(BlockingPipeline(), max_workers=1)
    manager.shutdown()
    with pytest.raises(RuntimeError):
        manager.ingest(make_course())
