"""Service dependencies for FastAPI.

Long-lived objects (catalog, ingestion manager, data directory) live on
``app.state`` and are set up at startup; per-request repositories wrap the
request's database session.
"""
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.services.course_service import CourseCatalog, FavoritesRepository, get_course_or_404
from api.services.exam_service import ExamRepository
from api.services.ingestion_manager import IngestionManager
from api.services.question_service import QuestionSetStore
from api.services.training_service import TrainingHistoryRepository
from api.utils import validate_id
from models import Course


def get_catalog(request: Request) -> CourseCatalog:
    return request.app.state.catalog


def get_data_dir(request: Request) -> Path:
    return request.app.state.data_dir


def get_ingestion_manager(request: Request) -> IngestionManager:
    return request.app.state.ingestion_manager


def get_course(
    course_id: str,
    catalog: Annotated[CourseCatalog, Depends(get_catalog)],
) -> Course:
    """Resolve the ``course_id`` path parameter to a catalog entry (404 if unknown)."""
    return get_course_or_404(catalog, validate_id("courseId", course_id))


def get_favorites(db: Annotated[DbSession, Depends(get_db)]) -> FavoritesRepository:
    return FavoritesRepository(db)


def get_training_repository(
    db: Annotated[DbSession, Depends(get_db)],
) -> TrainingHistoryRepository:
    return TrainingHistoryRepository(db)


def get_exam_repository(db: Annotated[DbSession, Depends(get_db)]) -> ExamRepository:
    return ExamRepository(db)


def get_question_store(
    history: Annotated[TrainingHistoryRepository, Depends(get_training_repository)],
    data_dir: Annotated[Path, Depends(get_data_dir)],
) -> QuestionSetStore:
    return QuestionSetStore(history=history, data_dir=data_dir)
