"""Read path for the course page and its serializers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.database import MAX_ROW_ID
from ..core.errors import StorageError, ValidationError
from ..core.result import Result
from ..models import Lesson, Progress

logger = logging.getLogger(__name__)


def _isoformat(value) -> str | None:
    if value is None:
        return None
    out = value.isoformat()
    if value.tzinfo is None:
        out += "Z"
    return out


def lesson_to_dict(lesson: Lesson) -> Dict[str, Any]:
    """Serialise a lesson model to API-friendly dict."""

    return {
        "id": lesson.id,
        "title": lesson.title,
        "videoUrl": lesson.video_url,
        "order": lesson.order,
    }


def progress_to_dict(progress: Progress) -> Dict[str, Any]:
    """Serialise a progress row to API-friendly dict."""

    return {
        "id": progress.id,
        "userId": progress.user_id,
        "lessonId": progress.lesson_id,
        "completed": progress.completed,
        "completedAt": _isoformat(progress.completed_at),
    }


@dataclass(frozen=True)
class CourseData:
    lessons: List[Lesson]
    progress: List[Progress]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lessons": [lesson_to_dict(lesson) for lesson in self.lessons],
            "progress": [progress_to_dict(row) for row in self.progress],
        }


class CourseDataAggregator:
    """Returns every lesson in playback order plus one user's progress rows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def for_user(self, user_id: int) -> Result[CourseData]:
        if (
            isinstance(user_id, bool)
            or not isinstance(user_id, int)
            or not 0 < user_id <= MAX_ROW_ID
        ):
            return Result.failure(
                ValidationError("userId must be a positive integer", step="course_read")
            )
        try:
            lessons = self._session.exec(
                select(Lesson).order_by(Lesson.order.asc(), Lesson.id.asc())
            ).all()
            progress = self._session.exec(
                select(Progress)
                .where(Progress.user_id == user_id)
                .order_by(Progress.id.asc())
            ).all()
        except SQLAlchemyError as exc:
            logger.error("Reading course data for user %s failed: %s", user_id, exc)
            return Result.failure(
                StorageError(f"Reading course data failed: {exc}", step="course_read")
            )
        return Result.success(CourseData(lessons=list(lessons), progress=list(progress)))


__all__ = [
    "CourseData",
    "CourseDataAggregator",
    "lesson_to_dict",
    "progress_to_dict",
]
