"""Database models."""
from api.models.db.exam import ExamMode, ExamResult
from api.models.db.favorite import FavoriteCourse
from api.models.db.training import QuestionStat, TrainingSummary

__all__ = [
    "ExamMode",
    "ExamResult",
    "FavoriteCourse",
    "QuestionStat",
    "TrainingSummary",
]
