"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import DATA_DIR, MAX_CONCURRENT_INGESTIONS
from api.database import init_db
from api.routes import assets, courses, downloads, exams, questions, training
from api.services.course_service import CourseCatalog
from api.services.ingestion_manager import IngestionManager
from api.services.ingestion_service import CourseIngestionPipeline
from core.logging_setup import setup_console_logging

setup_console_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="CloudMaster API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database, catalog and ingestion workers on startup."""
    init_db()
    if not hasattr(app.state, "data_dir"):
        app.state.data_dir = DATA_DIR
    if not hasattr(app.state, "catalog"):
        app.state.catalog = CourseCatalog.from_file()
    if not hasattr(app.state, "ingestion_manager"):
        app.state.ingestion_manager = IngestionManager(
            CourseIngestionPipeline(data_dir=app.state.data_dir),
            max_workers=MAX_CONCURRENT_INGESTIONS,
        )
    app.state.batch = None
    logger.info(f"Serving {len(app.state.catalog)} courses from {app.state.data_dir}")


@app.on_event("shutdown")
def shutdown_events() -> None:
    """Cancel in-flight downloads and stop worker threads."""
    manager = getattr(app.state, "ingestion_manager", None)
    if manager is not None:
        manager.shutdown(wait=False)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(courses.router)
app.include_router(downloads.router)
app.include_router(questions.router)
app.include_router(training.router)
app.include_router(exams.router)
app.include_router(assets.router)
