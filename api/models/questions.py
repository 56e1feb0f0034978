"""Question Pydantic models."""
from pydantic import BaseModel

from models import Question


class ChoiceResponse(BaseModel):
    id: str
    text: str
    correct: bool


class ImageResponse(BaseModel):
    path: str
    url: str | None = None
    downloaded: bool = False


class QuestionResponse(BaseModel):
    """Question as served to training and exam clients."""

    id: str
    question: str
    choices: list[ChoiceResponse]
    multiple_response: bool = False
    response_count: int = 1
    images: list[ImageResponse] = []

    @classmethod
    def from_question(cls, question: Question) -> "QuestionResponse":
        return cls(
            id=question.id,
            question=question.text,
            choices=[
                ChoiceResponse(id=choice.id, text=choice.text, correct=choice.is_correct)
                for choice in question.choices
            ],
            multiple_response=question.is_multiple_response,
            response_count=question.required_selection_count,
            images=[
                ImageResponse(path=image.path, url=image.url, downloaded=image.downloaded)
                for image in question.images
            ],
        )
