"""Database configuration and session helpers."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}

# Largest value a signed 64-bit integer primary key can hold.
MAX_ROW_ID = 2**63 - 1


class Database:
    """Owns the engine for one relational store.

    Initialization failures are recorded in ``init_error`` rather than raised,
    so the process can still answer its status route while the store is down.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.init_error: Optional[Dict[str, str]] = None
        self._ready = False

        if url in _IN_MEMORY_URLS:
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif url.startswith("sqlite"):
            self.engine = create_engine(
                url, echo=echo, connect_args={"check_same_thread": False}
            )
        else:
            self.engine = create_engine(url, echo=echo, pool_pre_ping=True)

    @property
    def available(self) -> bool:
        return self._ready

    def initialize(self, *, reset: bool = False) -> bool:
        """Create tables (dropping them first on ``reset``)."""

        from .. import models  # noqa: F401 - ensure models are registered with SQLModel

        try:
            if reset:
                logger.warning("DB_RESET enabled, dropping all tables")
                SQLModel.metadata.drop_all(self.engine)
            SQLModel.metadata.create_all(self.engine)
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            self._ready = False
            self.init_error = {
                "step": "Database Initialization",
                "message": str(exc.orig) if getattr(exc, "orig", None) else str(exc),
                "code": getattr(exc, "code", None) or "N/A",
            }
            logger.error("Database initialization failed: %s", self.init_error["message"])
            return False

        self._ready = True
        self.init_error = None
        return True

    def ensure_ready(self) -> bool:
        """Return availability, retrying a failed initialization."""

        if self._ready:
            return True
        return self.initialize()

    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session

    def dispose(self) -> None:
        self.engine.dispose()


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a session on the app's database."""

    database: Database = request.app.state.database
    yield from database.session()


__all__ = ["MAX_ROW_ID", "Database", "get_session"]
