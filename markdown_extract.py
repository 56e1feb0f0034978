from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from errors import EmptyResultError
from identity import IdAllocator, choice_id, question_id
from models import Choice, CourseId, ImageRef, Question

log = logging.getLogger(__name__)

QUESTION_PATTERN = re.compile(r"^###\s+(.+?)\s*$")
CHOICE_PATTERN = re.compile(r"^\s*- \[( |x)\]\s+(.+?)\s*$")
IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\((images/[^)]+?)\)")

# Source repositories embed community/sponsor banners under images/ as well.
IGNORED_IMAGE_MARKERS = ("discord", "promotional")


def course_image_path(course_id: str, captured: str) -> str:
    return f"images/{course_id}/{captured}"


def is_ignored_image(path: str) -> bool:
    return any(marker in path for marker in IGNORED_IMAGE_MARKERS)


@dataclass
class _Draft:
    text: str
    line_no: int
    choices: list[tuple[str, bool]] = field(default_factory=list)
    images: list[str] = field(default_factory=list)

    @property
    def correct_count(self) -> int:
        return sum(1 for _, correct in self.choices if correct)


def build_question(
    text: str,
    choices: Iterable[tuple[str, bool]],
    images: Iterable[ImageRef],
    allocator: IdAllocator,
) -> Question:
    """Build a question with content-derived ids.

    Multiple response is derived from the number of correct choices, never
    trusted from the input.
    """
    choice_list = list(choices)
    qid = allocator.allocate(question_id(text, (c for c, _ in choice_list)))
    choice_ids = IdAllocator()
    built_choices = [
        Choice(id=choice_ids.allocate(choice_id(qid, c)), text=c, is_correct=correct)
        for c, correct in choice_list
    ]
    correct_count = sum(1 for choice in built_choices if choice.is_correct)
    multiple = correct_count > 1
    return Question(
        id=qid,
        text=text,
        choices=built_choices,
        is_multiple_response=multiple,
        required_selection_count=correct_count if multiple else 1,
        images=list(images),
    )


class MarkdownQuestionExtractor:
    def __init__(self, course_id: CourseId | str):
        self.course_id = course_id
        self.logs: list[str] = []  # dropped blocks, short summaries
        self.skipped = 0

    def extract(self, markdown: str) -> list[Question]:
        questions: list[Question] = []
        allocator = IdAllocator()
        current: _Draft | None = None
        filtered_images = 0

        for line_no, line in enumerate(markdown.splitlines(), start=1):
            heading = QUESTION_PATTERN.match(line)
            if heading:
                self._flush(current, questions, allocator)
                current = _Draft(text=heading.group(1), line_no=line_no)
                continue

            choice = CHOICE_PATTERN.match(line)
            if choice:
                if current is not None:
                    current.choices.append((choice.group(2), choice.group(1) == "x"))
                continue

            if current is None:
                continue
            for captured in IMAGE_PATTERN.findall(line):
                if is_ignored_image(captured):
                    filtered_images += 1
                    continue
                current.images.append(captured)

        self._flush(current, questions, allocator)

        if filtered_images:
            self.logs.append(f"Filtered images: {filtered_images}")
        log.info(
            "Parsed %d questions for %s (skipped %d blocks)",
            len(questions),
            self.course_id,
            self.skipped,
        )
        if not questions:
            raise EmptyResultError(
                self.course_id, "Course has no questions, please contact developer"
            )
        return questions

    def _flush(
        self,
        draft: _Draft | None,
        questions: list[Question],
        allocator: IdAllocator,
    ) -> None:
        if draft is None:
            return
        if not draft.choices:
            self._skip(draft, "no choices")
            return
        if draft.correct_count == 0:
            self._skip(draft, "no correct choice")
            return
        images = [
            ImageRef(path=course_image_path(self.course_id, captured))
            for captured in draft.images
        ]
        questions.append(build_question(draft.text, draft.choices, images, allocator))

    def _skip(self, draft: _Draft, reason: str) -> None:
        self.skipped += 1
        self.logs.append(f"Line {draft.line_no}: skipped '{draft.text[:60]}' ({reason})")
        log.debug("Skipping block at line %d: %s", draft.line_no, reason)


def parse_markdown(markdown: str, course_id: CourseId | str) -> list[Question]:
    """Parse a course README into questions.

    Raises:
        EmptyResultError: if no question block could be recovered.
    """
    return MarkdownQuestionExtractor(course_id).extract(markdown)
