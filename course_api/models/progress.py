"""Database model for lesson completion."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Progress(SQLModel, table=True):
    """Completion fact, at most one per (user, lesson)."""

    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_progress_user_lesson"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    user_id: int = ORMField(foreign_key="users.id", index=True)
    lesson_id: int = ORMField(foreign_key="lessons.id")
    completed: bool = False
    completed_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Progress"]
