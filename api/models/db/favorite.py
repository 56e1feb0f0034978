"""
Favorite course model.
"""

from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from api.database import Base


class FavoriteCourse(Base):
    """A course marked as favorite; favorites can be downloaded in one batch."""

    __tablename__ = "favorite_courses"

    course_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    added_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
