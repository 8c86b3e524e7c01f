"""Unit tests for the Google identity provider client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from authlib.oauth2.rfc7636 import create_s256_code_challenge

from course_api.core import AuthProviderError
from course_api.services import GoogleIdentityProvider, GoogleProfile
from course_api.services.google import TOKEN_URL, USERINFO_URL

REDIRECT_URI = "http://localhost:3000/api/auth/callback/google"


def make_provider(handler) -> GoogleIdentityProvider:
    return GoogleIdentityProvider(
        client_id="cid",
        client_secret="csecret",
        redirect_uri=REDIRECT_URI,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _unexpected(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


class TestAuthorizationUrl:
    def test_embeds_state_challenge_and_scopes(self):
        provider = make_provider(_unexpected)

        url = provider.authorization_url("state-123", "verifier-" + "v" * 40)

        parsed = urlparse(url)
        query = {key: values[0] for key, values in parse_qs(parsed.query).items()}
        assert parsed.netloc == "accounts.google.com"
        assert query["client_id"] == "cid"
        assert query["redirect_uri"] == REDIRECT_URI
        assert query["response_type"] == "code"
        assert query["state"] == "state-123"
        assert query["scope"] == "openid profile email"
        assert query["code_challenge_method"] == "S256"
        assert query["code_challenge"] == create_s256_code_challenge(
            "verifier-" + "v" * 40
        )

    def test_verifier_is_not_leaked_in_url(self):
        provider = make_provider(_unexpected)
        verifier = "secret-verifier-" + "x" * 30

        assert verifier not in provider.authorization_url("s", verifier)


class TestExchangeCode:
    @pytest.mark.asyncio
    async def test_posts_code_and_verifier(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = {
                key: values[0]
                for key, values in parse_qs(request.content.decode()).items()
            }
            return httpx.Response(200, json={"access_token": "at-1", "token_type": "Bearer"})

        provider = make_provider(handler)

        token = await provider.exchange_code("code-1", "verifier-1")

        assert token == "at-1"
        assert seen["url"] == TOKEN_URL
        assert seen["form"]["code"] == "code-1"
        assert seen["form"]["code_verifier"] == "verifier-1"
        assert seen["form"]["grant_type"] == "authorization_code"
        assert seen["form"]["redirect_uri"] == REDIRECT_URI

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self):
        provider = make_provider(
            lambda request: httpx.Response(400, json={"error": "invalid_grant"})
        )

        with pytest.raises(AuthProviderError) as excinfo:
            await provider.exchange_code("code-1", "verifier-1")
        assert excinfo.value.step == "token_exchange"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        provider = make_provider(handler)

        with pytest.raises(AuthProviderError):
            await provider.exchange_code("code-1", "verifier-1")

    @pytest.mark.asyncio
    async def test_missing_access_token_raises(self):
        provider = make_provider(lambda request: httpx.Response(200, json={"token_type": "Bearer"}))

        with pytest.raises(AuthProviderError):
            await provider.exchange_code("code-1", "verifier-1")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        provider = make_provider(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(AuthProviderError):
            await provider.exchange_code("code-1", "verifier-1")


class TestFetchProfile:
    @pytest.mark.asyncio
    async def test_normalizes_userinfo(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == USERINFO_URL
            assert request.headers["Authorization"] == "Bearer at-1"
            return httpx.Response(
                200,
                json={
                    "sub": "g-1001",
                    "name": "Ana",
                    "email": "ana@example.com",
                    "picture": "https://example.com/ana.png",
                },
            )

        profile = await make_provider(handler).fetch_profile("at-1")

        assert profile == GoogleProfile(
            provider_id="g-1001",
            name="Ana",
            email="ana@example.com",
            avatar_url="https://example.com/ana.png",
        )

    @pytest.mark.asyncio
    async def test_unauthorized_raises(self):
        provider = make_provider(lambda request: httpx.Response(401, json={}))

        with pytest.raises(AuthProviderError) as excinfo:
            await provider.fetch_profile("expired")
        assert excinfo.value.step == "userinfo"

    @pytest.mark.asyncio
    async def test_missing_subject_raises(self):
        provider = make_provider(lambda request: httpx.Response(200, json={"name": "Ana"}))

        with pytest.raises(AuthProviderError):
            await provider.fetch_profile("at-1")


class TestGoogleProfile:
    def test_integer_subject_is_stringified(self):
        profile = GoogleProfile.from_userinfo({"sub": 1001, "name": "Ana"})

        assert profile.provider_id == "1001"

    def test_name_falls_back_to_email_local_part(self):
        profile = GoogleProfile.from_userinfo({"sub": "g-1", "email": "ana@example.com"})

        assert profile.name == "ana"

    def test_name_falls_back_to_subject(self):
        profile = GoogleProfile.from_userinfo({"sub": "g-1"})

        assert profile.name == "g-1"
        assert profile.email is None
        assert profile.avatar_url is None
