"""Recording lesson completion."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.database import MAX_ROW_ID
from ..core.errors import StorageError, ValidationError
from ..core.result import Result
from ..core.time import utcnow
from ..models import Lesson, Progress, User
from .upsert import insert_or_update

logger = logging.getLogger(__name__)


def _positive_id(value: Any, field: str) -> int:
    if value is None:
        raise ValidationError(f"{field} is required", step="progress")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", step="progress")
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise ValidationError(f"{field} must be an integer", step="progress") from exc
    if not isinstance(value, int) or not 0 < value <= MAX_ROW_ID:
        raise ValidationError(f"{field} must be a positive integer", step="progress")
    return value


class ProgressRecorder:
    """Upserts the completion fact for a (user, lesson) pair.

    Completion is monotonic: repeating the call keeps a single row with
    ``completed`` set and the first ``completed_at``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def complete(self, user_id: Any, lesson_id: Any) -> Result[Progress]:
        try:
            user_id = _positive_id(user_id, "userId")
            lesson_id = _positive_id(lesson_id, "lessonId")
        except ValidationError as exc:
            return Result.failure(exc)

        try:
            if self._session.get(User, user_id) is None:
                return Result.failure(
                    ValidationError(f"Unknown userId {user_id}", step="progress")
                )
            if self._session.get(Lesson, lesson_id) is None:
                return Result.failure(
                    ValidationError(f"Unknown lessonId {lesson_id}", step="progress")
                )

            insert_or_update(
                self._session,
                Progress,
                {
                    "user_id": user_id,
                    "lesson_id": lesson_id,
                    "completed": True,
                    "completed_at": utcnow(),
                },
                conflict_columns=["user_id", "lesson_id"],
                update={"completed": True},
            )
            progress = self._session.exec(
                select(Progress).where(
                    Progress.user_id == user_id, Progress.lesson_id == lesson_id
                )
            ).one()
            self._session.commit()
        except (SQLAlchemyError, StorageError) as exc:
            self._session.rollback()
            logger.error(
                "Recording progress failed for user %s lesson %s: %s",
                user_id,
                lesson_id,
                exc,
            )
            return Result.failure(
                StorageError(f"Recording progress failed: {exc}", step="progress")
            )

        logger.info("User %s completed lesson %s", user_id, lesson_id)
        return Result.success(progress)


__all__ = ["ProgressRecorder"]
