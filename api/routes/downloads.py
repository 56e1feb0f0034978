"""Course download (ingestion) endpoints."""
import logging
import threading
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from api.dependencies import get_catalog, get_course, get_favorites, get_ingestion_manager
from api.models import BatchDownloadStatus, DownloadStatus
from api.services.course_service import CourseCatalog, FavoritesRepository
from api.services.ingestion_manager import BatchIngestion, IngestionManager
from models import Course

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["downloads"])

# Guards the check-and-set of app.state.batch across worker threads.
_batch_lock = threading.Lock()


def _batch_status(batch: BatchIngestion) -> BatchDownloadStatus:
    snapshot = batch.snapshot()
    return BatchDownloadStatus(
        total=snapshot.total,
        completed=snapshot.completed,
        failed=snapshot.failed,
        progress=snapshot.progress,
        done=batch.done(),
        courses=[DownloadStatus(**handle.snapshot()) for handle in batch.handles.values()],
    )


@router.post("/courses/{course_id}/download", response_model=DownloadStatus, status_code=202)
def start_download(
    course: Annotated[Course, Depends(get_course)],
    manager: Annotated[IngestionManager, Depends(get_ingestion_manager)],
) -> DownloadStatus:
    """Start downloading a course; a download already in flight is restarted."""
    handle = manager.ingest(course)
    return DownloadStatus(**handle.snapshot())


@router.get("/courses/{course_id}/download", response_model=DownloadStatus)
def get_download_status(
    course: Annotated[Course, Depends(get_course)],
    manager: Annotated[IngestionManager, Depends(get_ingestion_manager)],
) -> DownloadStatus:
    handle = manager.status(course.short_name)
    if handle is None:
        raise HTTPException(status_code=404, detail="No download for this course")
    return DownloadStatus(**handle.snapshot())


@router.delete("/courses/{course_id}/download")
def cancel_download(
    course: Annotated[Course, Depends(get_course)],
    manager: Annotated[IngestionManager, Depends(get_ingestion_manager)],
) -> dict[str, object]:
    return {"courseId": course.short_name, "cancelled": manager.cancel(course.short_name)}


@router.post("/downloads/favorites", response_model=BatchDownloadStatus, status_code=202)
def download_favorites(
    request: Request,
    catalog: Annotated[CourseCatalog, Depends(get_catalog)],
    favorites: Annotated[FavoritesRepository, Depends(get_favorites)],
    manager: Annotated[IngestionManager, Depends(get_ingestion_manager)],
) -> BatchDownloadStatus:
    """Download every favorite course concurrently."""
    with _batch_lock:
        current = getattr(request.app.state, "batch", None)
        if current is not None and not current.done():
            raise HTTPException(status_code=409, detail="Favorites download already running")

        courses = favorites.courses(catalog)
        if not courses:
            raise HTTPException(status_code=400, detail="No favorite courses")

        logger.info(f"Downloading {len(courses)} favorite courses")
        batch = manager.ingest_many(courses)
        request.app.state.batch = batch
    return _batch_status(batch)


@router.get("/downloads/favorites", response_model=BatchDownloadStatus)
def get_favorites_download(request: Request) -> BatchDownloadStatus:
    batch = getattr(request.app.state, "batch", None)
    if batch is None:
        raise HTTPException(status_code=404, detail="No favorites download")
    return _batch_status(batch)


@router.delete("/downloads/favorites")
def cancel_favorites_download(request: Request) -> dict[str, int]:
    batch = getattr(request.app.state, "batch", None)
    if batch is None:
        raise HTTPException(status_code=404, detail="No favorites download")
    return {"cancelled": batch.cancel()}
