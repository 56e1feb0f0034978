"""Validation utilities."""
from pathlib import Path

from fastapi import HTTPException


def validate_id(name: str, value: str) -> str:
    """Validate ID string (no path traversal)."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if Path(cleaned).name != cleaned or "/" in cleaned or "\\" in cleaned or cleaned.startswith("."):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned
