"""Pydantic models."""
from api.models.courses import (
    BatchDownloadStatus,
    CourseResponse,
    DownloadStatus,
    ExamDetailResponse,
    FavoriteResponse,
)
from api.models.exams import ExamResultResponse, ExamStartResponse, ExamSubmission
from api.models.questions import ChoiceResponse, ImageResponse, QuestionResponse
from api.models.training import (
    AnswerResult,
    AnswerSubmission,
    QuestionStatResponse,
    TrainingSummaryResponse,
)

__all__ = [
    "AnswerResult",
    "AnswerSubmission",
    "BatchDownloadStatus",
    "ChoiceResponse",
    "CourseResponse",
    "DownloadStatus",
    "ExamDetailResponse",
    "ExamResultResponse",
    "ExamStartResponse",
    "ExamSubmission",
    "FavoriteResponse",
    "ImageResponse",
    "QuestionResponse",
    "QuestionStatResponse",
    "TrainingSummaryResponse",
]
