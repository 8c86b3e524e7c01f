"""Course read endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from ...core import MAX_ROW_ID
from ...services import CourseDataAggregator
from ..deps import get_course_aggregator

router = APIRouter(prefix="/api", tags=["courses"])


@router.get("/course/{user_id}")
def get_course(
    user_id: int = Path(..., gt=0, le=MAX_ROW_ID),
    aggregator: CourseDataAggregator = Depends(get_course_aggregator),
):
    """All lessons in playback order plus the user's progress rows."""

    return aggregator.for_user(user_id).unwrap().to_dict()


__all__ = ["router"]
