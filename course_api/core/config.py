"""Application settings and environment helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv(override=False)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DB_PATH = _PROJECT_ROOT / "data" / "app.db"

_LOCAL_DEV_ORIGINS = [
    "http://localhost:4321",
    "http://127.0.0.1:4321",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the course API."""

    google_client_id: str
    google_client_secret: str
    secret_key: str
    backend_url: str = "http://localhost:3000"
    frontend_url: str = "http://localhost:4321"
    database_url: str = f"sqlite:///{_DEFAULT_DB_PATH}"
    database_url_set: bool = False
    environment: str = "development"
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    cookie_domain: Optional[str] = None
    allowed_cors_origins: List[str] = field(default_factory=list)
    db_reset: bool = False
    log_level: str = "INFO"
    port: int = 3000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def google_redirect_uri(self) -> str:
        return f"{self.backend_url.rstrip('/')}/api/auth/callback/google"

    @property
    def dashboard_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}/dashboard"


def load_settings() -> Settings:
    """Build settings from the process environment."""

    environment = (os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").strip().lower()
    frontend_url = os.getenv("FRONTEND_URL") or "http://localhost:4321"
    database_url = os.getenv("DATABASE_URL")

    if database_url is None:
        _DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    try:
        port = int(os.getenv("PORT", "3000"))
    except ValueError as exc:
        raise RuntimeError("PORT must be an integer") from exc

    return Settings(
        google_client_id=_require_env("GOOGLE_CLIENT_ID"),
        google_client_secret=_require_env("GOOGLE_CLIENT_SECRET"),
        secret_key=_require_env("SECRET_KEY"),
        backend_url=os.getenv("BACKEND_URL") or "http://localhost:3000",
        frontend_url=frontend_url,
        database_url=database_url or f"sqlite:///{_DEFAULT_DB_PATH}",
        database_url_set=database_url is not None,
        environment=environment,
        cookie_secure=_env_bool("COOKIE_SECURE", environment == "production"),
        cookie_samesite=os.getenv("COOKIE_SAMESITE", "lax"),
        cookie_domain=os.getenv("COOKIE_DOMAIN") or None,
        allowed_cors_origins=_unique(
            [
                frontend_url.rstrip("/"),
                *_split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS")),
                *_LOCAL_DEV_ORIGINS,
            ]
        ),
        db_reset=_env_bool("DB_RESET", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=port,
    )


__all__ = ["Settings", "load_settings"]
