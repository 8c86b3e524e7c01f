"""Database model for course lessons."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field as ORMField, SQLModel


class Lesson(SQLModel, table=True):
    """A video lesson; ``order`` sequences playback."""

    __tablename__ = "lessons"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    title: str = ORMField(max_length=255)
    video_url: str = ORMField(max_length=255)
    order: int = ORMField(unique=True, index=True)


__all__ = ["Lesson"]
