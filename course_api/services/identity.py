"""Idempotent mapping from a Google identity to a local user."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.errors import StorageError
from ..core.result import Result
from ..models import User
from .google import GoogleProfile
from .upsert import insert_ignore

logger = logging.getLogger(__name__)


class IdentityProvisioner:
    """Resolves a provider identity to exactly one ``users`` row.

    The insert is conflict-safe on ``google_id``, so concurrent first logins
    for the same identity converge on one row. An existing row is returned as
    stored; profile fields from later logins never overwrite it.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def provision(self, profile: GoogleProfile) -> Result[User]:
        try:
            insert_ignore(
                self._session,
                User,
                {
                    "username": profile.name,
                    "email": profile.email,
                    "google_id": profile.provider_id,
                    "avatar_url": profile.avatar_url,
                },
                conflict_columns=["google_id"],
            )
            user = self._session.exec(
                select(User).where(User.google_id == profile.provider_id)
            ).one()
            self._session.commit()
        except (SQLAlchemyError, StorageError) as exc:
            self._session.rollback()
            logger.error("User provisioning failed for provider identity: %s", exc)
            return Result.failure(
                StorageError(f"User provisioning failed: {exc}", step="provisioning")
            )

        logger.info("Resolved provider identity to user %s", user.id)
        return Result.success(user)


__all__ = ["IdentityProvisioner"]
