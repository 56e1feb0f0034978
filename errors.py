"""Failure types raised while ingesting a course."""
from __future__ import annotations


class IngestionError(Exception):
    """Base failure for one course's ingestion.

    The message always names the course so it can be shown as-is.
    """

    def __init__(self, course_id: str, message: str):
        self.course_id = course_id
        self.message = message
        super().__init__(f"{course_id}: {message}")


class InvalidURLError(IngestionError):
    """Question or repository URL is malformed (raised before any I/O)."""


class NetworkError(IngestionError):
    """Transport failure fetching the markdown document or an image."""


class ParseError(IngestionError):
    """Markdown could not be decoded or interpreted."""


class EmptyResultError(ParseError):
    """Markdown yielded zero questions."""


class StorageError(IngestionError):
    """Local filesystem write or create failed."""


class IngestionCancelled(IngestionError):
    """Ingestion was cancelled before it finished."""
