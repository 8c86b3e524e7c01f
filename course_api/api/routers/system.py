"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter(tags=["system"])


@router.get("/")
def status(request: Request) -> Dict[str, Any]:
    """Report API and database status; reachable even when the store is down."""

    settings = request.app.state.settings
    database = request.app.state.database
    return {
        "status": "online" if database.available else "error",
        "message": "Course API status",
        "init_error": database.init_error,
        "config": {
            "DATABASE_URL_SET": settings.database_url_set,
            "APP_ENV": settings.environment,
            "BACKEND_URL": settings.backend_url,
        },
        "endpoints": {
            "auth_google": "/api/auth/google",
            "course_data": "/api/course/:userId",
            "complete": "/api/complete",
        },
    }


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple liveness probe."""

    return {"ok": True}


__all__ = ["router"]
