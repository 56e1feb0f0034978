"""File handling utilities."""
import os
import shutil
import tempfile
from pathlib import Path

from fastapi import HTTPException


def safe_asset_path(base_dir: Path, asset_path: str) -> Path:
    """Resolve asset path safely (prevent path traversal)."""
    resolved = (base_dir / asset_path).resolve()
    if base_dir.resolve() not in resolved.parents and resolved != base_dir.resolve():
        raise HTTPException(status_code=400, detail="Invalid asset path")
    return resolved


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write to a temp file beside the target, then rename over it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    """Atomic UTF-8 text write."""
    atomic_write_bytes(path, text.encode("utf-8"))


def merge_tree(source: Path, target: Path) -> int:
    """Move every file under source into target, overwriting. Returns file count."""
    moved = 0
    for item in sorted(source.rglob("*")):
        if not item.is_file():
            continue
        destination = target / item.relative_to(source)
        destination.parent.mkdir(parents=True, exist_ok=True)
        os.replace(item, destination)
        moved += 1
    return moved


def remove_tree(path: Path) -> None:
    """Remove directory tree if present."""
    shutil.rmtree(path, ignore_errors=True)
