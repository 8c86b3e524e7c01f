"""Lesson completion endpoint."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ...services import ProgressRecorder
from ..deps import get_progress_recorder

router = APIRouter(prefix="/api", tags=["progress"])


@router.post("/complete")
def complete_lesson(
    body: Dict[str, Any] = Body(...),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
):
    """Mark a lesson as completed for a user."""

    recorder.complete(body.get("userId"), body.get("lessonId")).unwrap()
    return {"success": True, "message": "Progress saved!"}


__all__ = ["router"]
