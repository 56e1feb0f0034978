"""Application configuration and constants."""
import os
import sys
from pathlib import Path


def _resource_path(relative: str) -> Path:
    """Get path to bundled resource, works for PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        base_dir = Path(sys._MEIPASS)
    else:
        base_dir = Path(__file__).resolve().parent
    return base_dir / relative


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float | None) -> float | None:
    """Parse float from environment variable; 0 or negative disables it."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else None


# Directories
DATA_DIR = Path(os.environ.get("CLOUDMASTER_DATA_DIR", Path.cwd() / "data"))
DATA_DIR.mkdir(parents=True, exist_ok=True)

COURSE_CATALOG_PATH = Path(
    os.environ.get("CLOUDMASTER_CATALOG", _resource_path("data/courses.json"))
)

# Database
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DATA_DIR / 'cloudmaster.db'}"
)

# Network
HTTP_TIMEOUT_SECONDS = _parse_float_env("CLOUDMASTER_HTTP_TIMEOUT", 30.0)
USER_AGENT = os.environ.get("CLOUDMASTER_USER_AGENT", "cloudmaster-server/0.3")

# Ingestion
MAX_CONCURRENT_INGESTIONS = max(1, _parse_int_env("CLOUDMASTER_MAX_WORKERS", 4))

# Exams
EXAM_PASS_PERCENT = _parse_int_env("CLOUDMASTER_EXAM_PASS_PERCENT", 70)
