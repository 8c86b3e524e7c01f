"""Google OAuth authentication routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlmodel import Session

from ...core import Settings, get_session
from ...models import User
from ...services import AuthorizationInitiator, CallbackValidator, OAuthCookies
from ..deps import (
    get_authorization_initiator,
    get_callback_validator,
    get_oauth_cookies,
    get_settings,
)
from ..errors import error_response

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/auth/google")
def auth_google_start(
    initiator: AuthorizationInitiator = Depends(get_authorization_initiator),
    cookies: OAuthCookies = Depends(get_oauth_cookies),
):
    """Redirect to Google's consent screen with a fresh nonce pair."""

    auth_request = initiator.begin().unwrap()
    response = RedirectResponse(auth_request.url, status_code=302)
    cookies.issue(response, auth_request.session)
    return response


@router.get("/auth/callback/google")
async def auth_google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    validator: CallbackValidator = Depends(get_callback_validator),
    cookies: OAuthCookies = Depends(get_oauth_cookies),
    settings: Settings = Depends(get_settings),
):
    """Finish the login; the nonce cookies are consumed whatever the outcome."""

    result = await validator.complete(code, state, request.cookies)
    if result.ok:
        user = result.unwrap()
        request.session["uid"] = user.id
        response = RedirectResponse(settings.dashboard_url, status_code=302)
    else:
        response = error_response(request, result.error)
    cookies.clear(response)
    return response


@router.post("/auth/logout")
def auth_logout(request: Request):
    request.session.clear()
    return JSONResponse({"ok": True})


@router.get("/me")
def me(request: Request, session: Session = Depends(get_session)):
    uid = request.session.get("uid")
    if not uid:
        return JSONResponse({"user": None})
    user = session.get(User, int(uid))
    if not user:
        request.session.clear()
        return JSONResponse({"user": None})
    return JSONResponse(
        {
            "user": {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "avatarUrl": user.avatar_url,
            }
        }
    )


__all__ = ["router"]
