"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .courses import router as courses_router
from .progress import router as progress_router
from .system import router as system_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    courses_router,
    progress_router,
)

__all__ = ["ALL_ROUTERS"]
