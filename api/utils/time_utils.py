"""Time utilities."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_duration(total_seconds: int | float) -> str:
    """Format seconds as MM:SS (minutes may exceed 59)."""
    seconds = max(0, int(total_seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"
