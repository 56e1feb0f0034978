"""FastAPI dependencies."""
from api.dependencies.services import (
    get_catalog,
    get_course,
    get_data_dir,
    get_exam_repository,
    get_favorites,
    get_ingestion_manager,
    get_question_store,
    get_training_repository,
)

__all__ = [
    "get_catalog",
    "get_course",
    "get_data_dir",
    "get_exam_repository",
    "get_favorites",
    "get_ingestion_manager",
    "get_question_store",
    "get_training_repository",
]
