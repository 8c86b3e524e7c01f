"""
Google login flow.
Minting the (state, verifier) pair, carrying it in signed cookies, and
validating the provider callback before provisioning the user.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

from authlib.common.security import generate_token
from itsdangerous import BadSignature, TimestampSigner
from starlette.responses import Response

from ..core.errors import CourseError, ProvisioningError, ValidationError
from ..core.result import Result
from ..models import User
from .google import GoogleProfile
from .identity import IdentityProvisioner

STATE_COOKIE = "oauth_state"
VERIFIER_COOKIE = "oauth_code_verifier"
OAUTH_COOKIE_TTL = 600
# 43 characters from a 62-symbol alphabet, roughly 256 bits per secret.
NONCE_LENGTH = 43


class IdentityProvider(Protocol):
    def authorization_url(self, state: str, code_verifier: str) -> str: ...

    async def exchange_code(self, code: str, code_verifier: str) -> str: ...

    async def fetch_profile(self, access_token: str) -> GoogleProfile: ...


@dataclass(frozen=True)
class OAuthSession:
    """Nonce pair scoped to one in-flight login attempt."""

    state: str
    code_verifier: str

    @classmethod
    def mint(cls) -> "OAuthSession":
        return cls(state=generate_token(NONCE_LENGTH), code_verifier=generate_token(NONCE_LENGTH))


class OAuthCookies:
    """Issues, reads and clears the two short-lived OAuth cookies.

    Values are timestamp-signed, so a cookie older than ``max_age`` is
    rejected even if the client kept it past its ``Max-Age``.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        secure: bool = False,
        samesite: str = "lax",
        domain: Optional[str] = None,
        max_age: int = OAUTH_COOKIE_TTL,
    ) -> None:
        self._signer = TimestampSigner(secret_key, salt="oauth-cookie")
        self.secure = secure
        self.samesite = samesite
        self.domain = domain
        self.max_age = max_age

    def seal(self, value: str) -> str:
        return self._signer.sign(value).decode("utf-8")

    def unseal(self, sealed: Optional[str]) -> Optional[str]:
        if not sealed:
            return None
        try:
            return self._signer.unsign(sealed, max_age=self.max_age).decode("utf-8")
        except BadSignature:
            return None

    def issue(self, response: Response, session: OAuthSession) -> None:
        for name, value in (
            (STATE_COOKIE, session.state),
            (VERIFIER_COOKIE, session.code_verifier),
        ):
            response.set_cookie(
                name,
                self.seal(value),
                max_age=self.max_age,
                path="/",
                domain=self.domain,
                secure=self.secure,
                httponly=True,
                samesite=self.samesite,
            )

    def read(self, cookies: Mapping[str, str]) -> tuple[Optional[str], Optional[str]]:
        return (
            self.unseal(cookies.get(STATE_COOKIE)),
            self.unseal(cookies.get(VERIFIER_COOKIE)),
        )

    def clear(self, response: Response) -> None:
        for name in (STATE_COOKIE, VERIFIER_COOKIE):
            response.delete_cookie(
                name,
                path="/",
                domain=self.domain,
                secure=self.secure,
                httponly=True,
                samesite=self.samesite,
            )


@dataclass(frozen=True)
class AuthorizationRequest:
    url: str
    session: OAuthSession


class AuthorizationInitiator:
    """Starts a login attempt: fresh nonce pair plus the consent URL."""

    def __init__(self, provider: IdentityProvider) -> None:
        self._provider = provider

    def begin(self) -> Result[AuthorizationRequest]:
        session = OAuthSession.mint()
        url = self._provider.authorization_url(session.state, session.code_verifier)
        return Result.success(AuthorizationRequest(url=url, session=session))


class CallbackValidator:
    """Validates the provider redirect and resolves it to a local user.

    Checks run in a fixed order and stop at the first failure; no network
    call is made unless all of them pass.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        cookies: OAuthCookies,
        provisioner: IdentityProvisioner,
    ) -> None:
        self._provider = provider
        self._cookies = cookies
        self._provisioner = provisioner

    def validate(
        self,
        code: Optional[str],
        state: Optional[str],
        cookies: Mapping[str, str],
    ) -> Result[tuple[str, str]]:
        """Return ``(code, verifier)`` when the callback may proceed."""

        stored_state, verifier = self._cookies.read(cookies)
        if not code:
            return Result.failure(ValidationError("Missing code", step="validation"))
        if not state:
            return Result.failure(ValidationError("Missing state", step="validation"))
        if stored_state is None or not secrets.compare_digest(
            state.encode("utf-8"), stored_state.encode("utf-8")
        ):
            return Result.failure(ValidationError("State mismatch", step="validation"))
        if not verifier:
            return Result.failure(
                ValidationError("Missing or expired code verifier", step="validation")
            )
        return Result.success((code, verifier))

    async def complete(
        self,
        code: Optional[str],
        state: Optional[str],
        cookies: Mapping[str, str],
    ) -> Result[User]:
        checked = self.validate(code, state, cookies)
        if not checked.ok:
            return Result.failure(checked.error)  # type: ignore[arg-type]
        auth_code, verifier = checked.unwrap()

        try:
            access_token = await self._provider.exchange_code(auth_code, verifier)
            profile = await self._provider.fetch_profile(access_token)
        except CourseError as exc:
            return Result.failure(exc)

        provisioned = self._provisioner.provision(profile)
        if not provisioned.ok and not isinstance(provisioned.error, ProvisioningError):
            return Result.failure(
                ProvisioningError(str(provisioned.error), step="provisioning")
            )
        return provisioned


__all__ = [
    "OAUTH_COOKIE_TTL",
    "STATE_COOKIE",
    "VERIFIER_COOKIE",
    "AuthorizationInitiator",
    "AuthorizationRequest",
    "CallbackValidator",
    "IdentityProvider",
    "OAuthCookies",
    "OAuthSession",
]
