"""Utility modules."""
from api.utils.file_utils import (
    atomic_write_bytes,
    atomic_write_text,
    merge_tree,
    remove_tree,
    safe_asset_path,
)
from api.utils.json_utils import (
    json_dump,
    json_load,
    read_json_file,
    write_json_file,
)
from api.utils.paths import (
    course_images_dir,
    data_root,
    markdown_cache_path,
    question_set_path,
    staging_root,
)
from api.utils.time_utils import format_duration, utc_now
from api.utils.validation import validate_id

__all__ = [
    "atomic_write_bytes",
    "atomic_write_text",
    "merge_tree",
    "remove_tree",
    "safe_asset_path",
    "json_dump",
    "json_load",
    "read_json_file",
    "write_json_file",
    "course_images_dir",
    "data_root",
    "markdown_cache_path",
    "question_set_path",
    "staging_root",
    "format_duration",
    "utc_now",
    "validate_id",
]
