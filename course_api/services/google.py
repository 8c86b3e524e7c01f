"""
Google identity provider client.
Authorization URL construction, code exchange and userinfo retrieval.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from authlib.oauth2.rfc7636 import create_s256_code_challenge

from ..core.errors import AuthProviderError

logger = logging.getLogger(__name__)

AUTH_BASE = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = "openid profile email"


@dataclass(frozen=True)
class GoogleProfile:
    """Normalized userinfo payload."""

    provider_id: str
    name: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_userinfo(cls, data: Dict[str, Any]) -> "GoogleProfile":
        sub = data.get("sub")
        if sub is None or str(sub).strip() == "":
            raise AuthProviderError("Userinfo response missing subject", step="userinfo")
        provider_id = str(sub).strip()
        email = data.get("email") or None
        name = (data.get("name") or "").strip()
        if not name:
            name = email.split("@")[0] if email else provider_id
        return cls(
            provider_id=provider_id,
            name=name[:255],
            email=email,
            avatar_url=data.get("picture") or None,
        )


class GoogleIdentityProvider:
    """OAuth2 authorization-code client for Google with PKCE."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._http = http_client

    def authorization_url(self, state: str, code_verifier: str) -> str:
        """Build the consent-screen URL for one login attempt."""

        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": SCOPES,
            "state": state,
            "code_challenge": create_s256_code_challenge(code_verifier),
            "code_challenge_method": "S256",
        }
        return f"{AUTH_BASE}?{urlencode(params)}"

    async def exchange_code(self, code: str, code_verifier: str) -> str:
        """Exchange an authorization code for an access token."""

        data = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "code": code,
            "code_verifier": code_verifier,
            "grant_type": "authorization_code",
            "redirect_uri": self._redirect_uri,
        }
        try:
            response = await self._http.post(
                TOKEN_URL, data=data, headers={"Accept": "application/json"}
            )
        except httpx.RequestError as exc:
            logger.error("Google token request failed: %s", exc)
            raise AuthProviderError(
                "Failed to connect to Google token endpoint", step="token_exchange"
            ) from exc

        if response.status_code != 200:
            logger.error("Google token exchange failed: status=%d", response.status_code)
            raise AuthProviderError(
                f"Google token exchange failed: {response.status_code}",
                step="token_exchange",
            )

        try:
            token_data = response.json()
        except ValueError as exc:
            raise AuthProviderError(
                "Google token response is not JSON", step="token_exchange"
            ) from exc

        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            raise AuthProviderError(
                "Google token response missing access_token", step="token_exchange"
            )
        return access_token

    async def fetch_profile(self, access_token: str) -> GoogleProfile:
        """Read the OpenID userinfo document for ``access_token``."""

        try:
            response = await self._http.get(
                USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
            )
        except httpx.RequestError as exc:
            logger.error("Google userinfo request failed: %s", exc)
            raise AuthProviderError(
                "Failed to connect to Google userinfo endpoint", step="userinfo"
            ) from exc

        if response.status_code != 200:
            logger.error("Google userinfo failed: status=%d", response.status_code)
            raise AuthProviderError(
                f"Google userinfo failed: {response.status_code}", step="userinfo"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise AuthProviderError("Google userinfo is not JSON", step="userinfo") from exc
        if not isinstance(data, dict):
            raise AuthProviderError("Google userinfo is not an object", step="userinfo")
        return GoogleProfile.from_userinfo(data)


__all__ = ["GoogleIdentityProvider", "GoogleProfile", "SCOPES"]
