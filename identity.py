"""Content-derived identifiers for questions and choices.

Ids are hashes of the normalized text, so the same question keeps its id
across re-downloads and training history stays attached to it.
"""
from __future__ import annotations

import hashlib
import re
from typing import Iterable

QUESTION_ID_LENGTH = 16
CHOICE_ID_LENGTH = 12

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip().casefold()


def _digest(parts: Iterable[str], length: int) -> str:
    h = hashlib.sha256()
    for part in parts:
        h.update(part.encode("utf-8"))
        h.update(b"\x1f")
    return h.hexdigest()[:length]


def question_id(text: str, choice_texts: Iterable[str]) -> str:
    """Hash of the question text followed by its choice texts."""
    parts = [normalize_text(text)]
    parts.extend(normalize_text(choice) for choice in choice_texts)
    return _digest(parts, QUESTION_ID_LENGTH)


def choice_id(parent_id: str, text: str) -> str:
    return _digest([parent_id, normalize_text(text)], CHOICE_ID_LENGTH)


class IdAllocator:
    """Suffixes repeated ids with -2, -3, ... in the order they are seen."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def allocate(self, base: str) -> str:
        count = self._seen.get(base, 0) + 1
        self._seen[base] = count
        if count == 1:
            return base
        return f"{base}-{count}"
