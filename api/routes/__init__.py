"""API route modules."""
from api.routes import assets, courses, downloads, exams, questions, training

__all__ = ["assets", "courses", "downloads", "exams", "questions", "training"]
