"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .api import register_exception_handlers, register_routes
from .core import Database, Settings, configure_logging, load_settings
from .services import GoogleIdentityProvider
from .services.oauth import IdentityProvider

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    owns_database = database is None
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting course API: env=%s database_url_set=%s backend_url=%s",
            settings.environment,
            settings.database_url_set,
            settings.backend_url,
        )
        if database.initialize(reset=settings.db_reset):
            logger.info("Database ready")

        http_client: Optional[httpx.AsyncClient] = None
        if identity_provider is None:
            http_client = httpx.AsyncClient(timeout=20)
            app.state.identity_provider = GoogleIdentityProvider(
                client_id=settings.google_client_id,
                client_secret=settings.google_client_secret,
                redirect_uri=settings.google_redirect_uri,
                http_client=http_client,
            )
        try:
            yield
        finally:
            if http_client is not None:
                await http_client.aclose()
            if owns_database:
                database.dispose()

    app = FastAPI(title="Course API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.identity_provider = identity_provider

    @app.middleware("http")
    async def require_database(request: Request, call_next):
        if request.url.path.startswith("/api/") and not database.ensure_ready():
            logger.error("Rejecting %s: database unavailable", request.url.path)
            return JSONResponse(
                {
                    "error": "Database unavailable",
                    "details": "The database could not be initialized. Check DATABASE_URL.",
                },
                status_code=503,
            )
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie="sid",
        https_only=settings.cookie_secure,
        same_site=settings.cookie_samesite,
        domain=settings.cookie_domain,
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
