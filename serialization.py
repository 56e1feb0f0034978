from __future__ import annotations

from typing import Any, Iterable

from identity import IdAllocator
from markdown_extract import build_question
from models import ImageRef, Question


def serialize_image(image: ImageRef) -> dict[str, Any]:
    return {"path": image.path, "url": image.url, "downloaded": image.downloaded}


def serialize_question(question: Question) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "question": question.text,
        "choices": [
            {"text": choice.text, "correct": choice.is_correct}
            for choice in question.choices
        ],
    }
    # Only present for multiple response questions.
    if question.is_multiple_response:
        payload["multiple_response"] = True
        payload["response_count"] = question.required_selection_count
    payload["images"] = [serialize_image(image) for image in question.images]
    return payload


def serialize_question_set(questions: Iterable[Question]) -> list[dict[str, Any]]:
    return [serialize_question(question) for question in questions]


def _deserialize_image(raw: object) -> ImageRef | None:
    if not isinstance(raw, dict):
        return None
    path = raw.get("path")
    if not isinstance(path, str) or not path:
        return None
    url = raw.get("url")
    return ImageRef(
        path=path,
        url=url if isinstance(url, str) else None,
        downloaded=bool(raw.get("downloaded", False)),
    )


def deserialize_question_set(payload: object) -> list[Question]:
    """
    Rebuild questions from a persisted question set.

    Ids are not stored; they are recomputed from content, which yields the
    same ids the parser assigned. Entries that are not objects, lack
    question text, have no usable choices or hold a non-list images value
    are skipped.
    """
    if not isinstance(payload, list):
        raise ValueError("Question set must be a JSON array")

    allocator = IdAllocator()
    questions: list[Question] = []
    for raw in payload:
        if not isinstance(raw, dict):
            continue
        text = raw.get("question")
        if not isinstance(text, str):
            continue
        raw_choices = raw.get("choices") or []
        raw_images = raw.get("images") or []
        if not isinstance(raw_choices, list) or not isinstance(raw_images, list):
            continue
        choices = [
            (str(choice.get("text", "")), bool(choice.get("correct", False)))
            for choice in raw_choices
            if isinstance(choice, dict)
        ]
        if not choices:
            continue
        images = [
            image
            for image in (_deserialize_image(item) for item in raw_images)
            if image is not None
        ]
        questions.append(build_question(text, choices, images, allocator))
    return questions
