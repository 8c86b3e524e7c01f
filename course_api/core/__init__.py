"""Core configuration and infrastructure helpers."""

from .config import Settings, load_settings
from .database import MAX_ROW_ID, Database, get_session
from .errors import (
    AuthProviderError,
    CourseError,
    ProvisioningError,
    StorageError,
    StoreUnavailableError,
    ValidationError,
)
from .logging import configure_logging
from .result import Result
from .time import utcnow

__all__ = [
    "MAX_ROW_ID",
    "AuthProviderError",
    "CourseError",
    "Database",
    "ProvisioningError",
    "Result",
    "Settings",
    "StorageError",
    "StoreUnavailableError",
    "ValidationError",
    "configure_logging",
    "get_session",
    "load_settings",
    "utcnow",
]
