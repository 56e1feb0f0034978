"""Downloaded image endpoints."""
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from api.dependencies import get_data_dir
from api.utils import safe_asset_path

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("/{asset_path:path}")
def get_asset(
    asset_path: str,
    data_dir: Annotated[Path, Depends(get_data_dir)],
) -> FileResponse:
    """Serve a downloaded image by its stored path (``images/<course>/...``)."""
    images_directory = Path(data_dir) / "images"
    relative = asset_path[len("images/"):] if asset_path.startswith("images/") else asset_path
    file_path = safe_asset_path(images_directory, relative)

    if not file_path.exists() or not file_path.is_file():
        raise HTTPException(status_code=404, detail="Asset not found")

    return FileResponse(file_path)
