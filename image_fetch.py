from __future__ import annotations

import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import Callable
from urllib.parse import urlsplit, urlunsplit

import requests

from errors import IngestionCancelled, InvalidURLError, NetworkError, StorageError
from models import CourseId, ImageRef, Question

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
GITHUB_HOST = "github.com"
RAW_GITHUB_HOST = "raw.githubusercontent.com"

ImageProgressFn = Callable[[int, int], None]


def validate_url(url: str | None, course_id: str, what: str = "URL") -> str:
    """Reject anything that is not an absolute http(s) URL."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(course_id, f"Missing {what}")
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        raise InvalidURLError(course_id, f"Invalid {what}: {url!r}") from None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidURLError(course_id, f"Invalid {what}: {url!r}")
    return url.strip()


def resolve_image_url(repository_url: str, image_path: str, course_id: str) -> str:
    """
    Map a stored image path to its raw-content URL.

    images/SAA-C03/images/q1.png + https://github.com/org/repo
    -> https://raw.githubusercontent.com/org/repo/main/images/q1.png
    """
    prefix = f"images/{course_id}/"
    relative = image_path[len(prefix):] if image_path.startswith(prefix) else image_path
    blob_url = f"{repository_url.rstrip('/')}/blob/main/{relative}"

    parts = urlsplit(blob_url)
    netloc = parts.netloc
    if netloc == GITHUB_HOST or netloc == f"www.{GITHUB_HOST}":
        netloc = RAW_GITHUB_HOST
    path = parts.path.replace("/blob/", "/", 1)
    return urlunsplit((parts.scheme, netloc, path, parts.query, parts.fragment))


def check_cancelled(course_id: str, cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise IngestionCancelled(course_id, "Download cancelled")


def download_bytes(
    session: requests.Session,
    url: str,
    course_id: str,
    timeout: float | None = None,
    cancel_event: threading.Event | None = None,
) -> bytes:
    """Single-attempt streamed GET; the cancel event is checked between chunks."""
    check_cancelled(course_id, cancel_event)
    try:
        response = session.get(url, stream=True, timeout=timeout)
    except requests.RequestException as exc:
        raise NetworkError(course_id, f"Failed to download {url}: {exc}") from exc

    try:
        response.raise_for_status()
        buffer = bytearray()
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            check_cancelled(course_id, cancel_event)
            if chunk:
                buffer.extend(chunk)
        return bytes(buffer)
    except requests.RequestException as exc:
        raise NetworkError(course_id, f"Failed to download {url}: {exc}") from exc
    finally:
        response.close()


def new_session(user_agent: str | None = None) -> requests.Session:
    session = requests.Session()
    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    return session


def count_images(questions: list[Question]) -> int:
    return sum(len(question.images) for question in questions)


def fetch_images(
    questions: list[Question],
    repository_url: str,
    course_id: CourseId | str,
    images_root: Path,
    on_progress: ImageProgressFn | None = None,
    session: requests.Session | None = None,
    timeout: float | None = None,
    cancel_event: threading.Event | None = None,
) -> list[Question]:
    """
    Download every referenced image below images_root.

    Returns new questions whose images carry the source URL and
    downloaded=True. The first failure propagates; nothing is returned for
    a partially downloaded course.
    """
    images_root = Path(images_root)
    total = count_images(questions)
    completed = 0
    if total == 0:
        return list(questions)
    repository_url = validate_url(repository_url, course_id, "repository URL")

    own_session = session is None
    if own_session:
        session = new_session()

    try:
        updated: list[Question] = []
        for question in questions:
            fetched: list[ImageRef] = []
            for image in question.images:
                url = resolve_image_url(repository_url, image.path, course_id)
                data = download_bytes(session, url, course_id, timeout, cancel_event)

                target = (images_root / image.path).resolve()
                if images_root.resolve() not in target.parents:
                    raise StorageError(course_id, f"Image path escapes storage: {image.path}")
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_bytes(data)
                except OSError as exc:
                    raise StorageError(course_id, f"Cannot write {target}: {exc}") from exc

                fetched.append(ImageRef(path=image.path, url=url, downloaded=True))
                completed += 1
                log.debug("Image %d/%d for %s: %s", completed, total, course_id, url)
                if on_progress is not None:
                    on_progress(completed, total)
            updated.append(replace(question, images=fetched))
    finally:
        if own_session:
            session.close()

    log.info("Downloaded %d images for %s", completed, course_id)
    return updated
