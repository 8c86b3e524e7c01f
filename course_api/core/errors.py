"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations

from typing import Optional


class CourseError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500
    public_message = "Internal server error"
    # Whether the message itself is safe to hand back to the client.
    expose = False

    def __init__(self, message: str, *, step: Optional[str] = None) -> None:
        super().__init__(message)
        self.step = step

    @property
    def client_message(self) -> str:
        return str(self) if self.expose else self.public_message


class ValidationError(CourseError):
    """Malformed or missing input, or a CSRF/nonce mismatch."""

    status_code = 400
    public_message = "Validation error"
    expose = True


class AuthProviderError(CourseError):
    """Token exchange or profile fetch with the identity provider failed."""

    public_message = "Authentication with Google failed"


class StorageError(CourseError):
    """The persistence layer rejected or could not perform an operation."""

    public_message = "Storage error"


class ProvisioningError(StorageError):
    """The user record for a completed login could not be created or read."""

    public_message = "Authentication with Google failed"


class StoreUnavailableError(StorageError):
    """The persistence layer cannot be reached at all."""

    status_code = 503
    public_message = "Database unavailable"


__all__ = [
    "AuthProviderError",
    "CourseError",
    "ProvisioningError",
    "StorageError",
    "StoreUnavailableError",
    "ValidationError",
]
