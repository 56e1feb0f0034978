"""Path utilities for per-course files.

Layout below the data directory::

    courses/<id>.json      persisted question set
    markdown/<id>.md       last downloaded README
    images/<id>/...        downloaded images (ImageRef.path is relative to the data dir)
    .staging/              scratch space for in-flight ingestions
"""
from pathlib import Path

from api.config import DATA_DIR


def data_root(data_dir: Path | None = None) -> Path:
    """Get data directory (configured default unless given)."""
    return Path(data_dir) if data_dir is not None else DATA_DIR


def question_set_path(course_id: str, data_dir: Path | None = None) -> Path:
    """Get path to persisted question set JSON."""
    return data_root(data_dir) / "courses" / f"{course_id}.json"


def markdown_cache_path(course_id: str, data_dir: Path | None = None) -> Path:
    """Get path to cached markdown document."""
    return data_root(data_dir) / "markdown" / f"{course_id}.md"


def course_images_dir(course_id: str, data_dir: Path | None = None) -> Path:
    """Get directory for course images."""
    return data_root(data_dir) / "images" / course_id


def staging_root(data_dir: Path | None = None) -> Path:
    """Get directory for ingestion scratch space."""
    return data_root(data_dir) / ".staging"
