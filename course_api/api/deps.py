"""FastAPI dependencies that hand the app's collaborators to routes."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import Settings, get_session
from ..services import (
    AuthorizationInitiator,
    CallbackValidator,
    CourseDataAggregator,
    IdentityProvisioner,
    OAuthCookies,
    ProgressRecorder,
)
from ..services.oauth import IdentityProvider


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_oauth_cookies(settings: Settings = Depends(get_settings)) -> OAuthCookies:
    return OAuthCookies(
        settings.secret_key,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        domain=settings.cookie_domain,
    )


def get_authorization_initiator(
    provider: IdentityProvider = Depends(get_identity_provider),
) -> AuthorizationInitiator:
    return AuthorizationInitiator(provider)


def get_callback_validator(
    provider: IdentityProvider = Depends(get_identity_provider),
    cookies: OAuthCookies = Depends(get_oauth_cookies),
    session: Session = Depends(get_session),
) -> CallbackValidator:
    return CallbackValidator(provider, cookies, IdentityProvisioner(session))


def get_progress_recorder(session: Session = Depends(get_session)) -> ProgressRecorder:
    return ProgressRecorder(session)


def get_course_aggregator(
    session: Session = Depends(get_session),
) -> CourseDataAggregator:
    return CourseDataAggregator(session)


__all__ = [
    "get_authorization_initiator",
    "get_callback_validator",
    "get_course_aggregator",
    "get_identity_provider",
    "get_oauth_cookies",
    "get_progress_recorder",
    "get_settings",
]
