"""Database model for users authenticated through Google."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field as ORMField, SQLModel


class User(SQLModel, table=True):
    """Local account mapped to exactly one Google identity."""

    __tablename__ = "users"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    username: str = ORMField(max_length=255)
    email: Optional[str] = ORMField(default=None, max_length=255)
    google_id: str = ORMField(max_length=255, unique=True, index=True)
    avatar_url: Optional[str] = ORMField(default=None, max_length=255)


__all__ = ["User"]
