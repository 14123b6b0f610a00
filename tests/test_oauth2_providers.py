"""Unit tests for OAuth2 providers"""

import hashlib
import hmac
from unittest.mock import AsyncMock
from urllib.parse import parse_qs

import httpx
import pytest
from authlib.integrations.httpx_client import AsyncOAuth2Client

from socialite.core.exceptions import AuthenticationError, InvalidStateError
from socialite.two import (
    BitbucketProvider,
    FacebookProvider,
    GithubProvider,
    GoogleProvider,
    LinkedInProvider,
)
from helpers import callback_request, query_of

GITHUB_PROFILE = {
    "id": 583231,
    "login": "octocat",
    "name": "The Octocat",
    "email": "octocat@github.com",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231",
}


class TestRedirect:
    @pytest.mark.asyncio
    async def test_redirect_stores_state_and_builds_url(self, config, server_request, session):
        provider = GithubProvider(server_request, config, session)

        response = await provider.redirect()

        location = response.headers["location"]
        query = query_of(location)
        assert response.status_code == 302
        assert location.startswith(GithubProvider.AUTHORIZATION_URL)
        assert query["client_id"] == "abc"
        assert query["redirect_uri"] == config["redirect"]
        assert query["response_type"] == "code"
        assert query["scope"] == "user:email"
        assert query["state"] == session.get("state")

    @pytest.mark.asyncio
    async def test_stateless_redirect_does_not_touch_session(
        self, config, server_request, session
    ):
        provider = GoogleProvider(server_request, config, session).stateless()

        await provider.redirect()

        assert session.get("state") is None

    @pytest.mark.asyncio
    async def test_scopes_and_extra_parameters(self, config, server_request, session):
        config["scopes"] = "https://www.googleapis.com/auth/calendar.readonly"
        provider = GoogleProvider(server_request, config, session)
        provider.scopes(["email"]).with_({"hd": "example.com", "prompt": "consent"})

        query = query_of((await provider.redirect()).headers["location"])

        assert query["scope"].split(" ") == [
            "openid",
            "profile",
            "email",
            "https://www.googleapis.com/auth/calendar.readonly",
        ]
        assert query["hd"] == "example.com"
        assert query["prompt"] == "consent"

    @pytest.mark.asyncio
    async def test_set_scopes_replaces_defaults(self, config, server_request, session):
        provider = LinkedInProvider(server_request, config, session).set_scopes(["openid"])

        query = query_of((await provider.redirect()).headers["location"])

        assert query["scope"] == "openid"

    @pytest.mark.asyncio
    async def test_facebook_uses_comma_separator_and_popup(self, config, server_request, session):
        config.update({"popup": True, "graph_version": "v20.0"})
        provider = FacebookProvider(server_request, config, session).scopes(["public_profile"])

        location = (await provider.redirect()).headers["location"]
        query = query_of(location)

        assert location.startswith("https://www.facebook.com/v20.0/dialog/oauth")
        assert query["scope"] == "email,public_profile"
        assert query["display"] == "popup"


class TestCallbackState:
    @pytest.mark.asyncio
    async def test_mismatched_state(self, config, session):
        session.set("state", "expected")
        provider = GithubProvider(callback_request(code="c", state="forged"), config, session)

        with pytest.raises(InvalidStateError):
            await provider.user()

        assert session.get("state") is None

    @pytest.mark.asyncio
    async def test_missing_session_state(self, config, session):
        provider = GithubProvider(callback_request(code="c", state="any"), config, session)

        with pytest.raises(InvalidStateError):
            await provider.user()

    @pytest.mark.asyncio
    async def test_provider_error_is_reported(self, config, session):
        session.set("state", "s1")
        request = callback_request(state="s1", error="access_denied")
        provider = GithubProvider(request, config, session)

        with pytest.raises(AuthenticationError) as exc_info:
            await provider.user()

        assert exc_info.value.details == {"error": "access_denied"}

    @pytest.mark.asyncio
    async def test_missing_code(self, config, session):
        session.set("state", "s1")
        provider = GithubProvider(callback_request(state="s1"), config, session)

        with pytest.raises(AuthenticationError, match="code is required"):
            await provider.user()


class TestCallbackUser:
    @pytest.mark.asyncio
    async def test_user_from_callback(self, config, session):
        session.set("state", "s1")
        provider = GithubProvider(callback_request(code="c0de", state="s1"), config, session)
        provider.get_access_token_response = AsyncMock(
            return_value={
                "access_token": "gho_token",
                "refresh_token": "ghr_token",
                "expires_in": 28800,
                "scope": "user:email,repo",
            }
        )
        provider.get_user_by_token = AsyncMock(return_value=dict(GITHUB_PROFILE))

        user = await provider.user()

        provider.get_access_token_response.assert_awaited_once_with("c0de")
        provider.get_user_by_token.assert_awaited_once_with("gho_token")
        assert user.id == "583231"
        assert user.nickname == "octocat"
        assert user.name == "The Octocat"
        assert user.email == "octocat@github.com"
        assert user.avatar == GITHUB_PROFILE["avatar_url"]
        assert user.token == "gho_token"
        assert user.refresh_token == "ghr_token"
        assert user.expires_in == 28800
        assert user.approved_scopes == ["user:email", "repo"]
        assert user.raw["login"] == "octocat"

    @pytest.mark.asyncio
    async def test_stateless_user_skips_state_check(self, config, session):
        provider = GoogleProvider(callback_request(code="c0de"), config, session).stateless()
        provider.get_access_token_response = AsyncMock(return_value={"access_token": "ya29"})
        provider.get_user_by_token = AsyncMock(
            return_value={"sub": "1098", "name": "Ada", "email": "ada@example.com"}
        )

        user = await provider.user()

        assert user.id == "1098"
        assert user.token == "ya29"
        assert user.approved_scopes == []

    @pytest.mark.asyncio
    async def test_missing_access_token(self, config, session):
        provider = GoogleProvider(callback_request(code="c0de"), config, session).stateless()
        provider.get_access_token_response = AsyncMock(return_value={"error": "bad"})

        with pytest.raises(AuthenticationError, match="No access token"):
            await provider.user()

    @pytest.mark.asyncio
    async def test_user_from_token(self, config, server_request, session):
        provider = GithubProvider(server_request, config, session)
        provider.get_user_by_token = AsyncMock(return_value=dict(GITHUB_PROFILE))

        user = await provider.user_from_token("gho_existing")

        assert user.id == "583231"
        assert user.token == "gho_existing"


def _mock_oauth(provider, handler):
    transport = httpx.MockTransport(handler)
    provider.get_oauth_client = lambda: AsyncOAuth2Client(
        client_id=provider.client_id,
        client_secret=provider.client_secret,
        redirect_uri=provider.redirect_uri,
        token_endpoint_auth_method=provider.TOKEN_ENDPOINT_AUTH_METHOD,
        transport=transport,
    )


class TestTokenExchange:
    @pytest.mark.asyncio
    async def test_code_exchange_posts_credentials(self, config, server_request, session):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = parse_qs(request.content.decode())
            return httpx.Response(
                200, json={"access_token": "tok", "token_type": "bearer", "scope": "user:email"}
            )

        provider = GithubProvider(server_request, config, session)
        _mock_oauth(provider, handler)

        token = await provider.get_access_token_response("c0de")

        assert token["access_token"] == "tok"
        assert captured["url"] == GithubProvider.TOKEN_URL
        assert captured["body"]["grant_type"] == ["authorization_code"]
        assert captured["body"]["code"] == ["c0de"]
        assert captured["body"]["client_id"] == ["abc"]
        assert captured["body"]["client_secret"] == ["s3c"]
        assert captured["body"]["redirect_uri"] == [config["redirect"]]

    @pytest.mark.asyncio
    async def test_bitbucket_sends_basic_auth(self, config, server_request, session):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["authorization"] = request.headers.get("authorization", "")
            captured["body"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "bb", "token_type": "bearer"})

        provider = BitbucketProvider(server_request, config, session)
        _mock_oauth(provider, handler)

        await provider.get_access_token_response("c0de")

        assert captured["authorization"].startswith("Basic ")
        assert "client_secret" not in captured["body"]

    @pytest.mark.asyncio
    async def test_failed_exchange_is_wrapped(self, config, server_request, session):
        provider = GithubProvider(server_request, config, session)
        _mock_oauth(
            provider,
            lambda request: httpx.Response(400, json={"error": "bad_verification_code"}),
        )

        with pytest.raises(AuthenticationError, match="github"):
            await provider.get_access_token_response("expired")


def _mock_http(provider, handler):
    transport = httpx.MockTransport(handler)
    provider.get_http_client = lambda: httpx.AsyncClient(transport=transport)


class TestGithubProvider:
    @pytest.mark.asyncio
    async def test_private_email_is_looked_up(self, config, server_request, session):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["authorization"] == "Bearer gho_token"
            if request.url.path == "/user/emails":
                return httpx.Response(
                    200,
                    json=[
                        {"email": "old@example.com", "primary": False, "verified": True},
                        {"email": "primary@example.com", "primary": True, "verified": True},
                    ],
                )
            return httpx.Response(200, json={**GITHUB_PROFILE, "email": None})

        provider = GithubProvider(server_request, config, session)
        _mock_http(provider, handler)

        profile = await provider.get_user_by_token("gho_token")

        assert profile["email"] == "primary@example.com"

    @pytest.mark.asyncio
    async def test_email_lookup_failure_is_tolerated(self, config, server_request, session):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/user/emails":
                return httpx.Response(403, json={"message": "forbidden"})
            return httpx.Response(200, json={**GITHUB_PROFILE, "email": None})

        provider = GithubProvider(server_request, config, session)
        _mock_http(provider, handler)

        profile = await provider.get_user_by_token("gho_token")

        assert profile["email"] is None

    @pytest.mark.asyncio
    async def test_profile_failure_raises(self, config, server_request, session):
        provider = GithubProvider(server_request, config, session)
        _mock_http(provider, lambda request: httpx.Response(401, json={}))

        with pytest.raises(AuthenticationError):
            await provider.get_user_by_token("revoked")


class TestFacebookProvider:
    @pytest.mark.asyncio
    async def test_profile_request_is_signed(self, config, server_request, session):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["params"] = dict(request.url.params)
            return httpx.Response(200, json={"id": "10", "name": "Mark", "email": "m@fb.com"})

        config["fields"] = ["name", "email"]
        provider = FacebookProvider(server_request, config, session)
        _mock_http(provider, handler)

        profile = await provider.get_user_by_token("EAAB")

        expected_proof = hmac.new(b"s3c", b"EAAB", hashlib.sha256).hexdigest()
        assert captured["path"] == "/v19.0/me"
        assert captured["params"] == {"fields": "name,email", "appsecret_proof": expected_proof}
        assert profile["name"] == "Mark"

    def test_map_user(self, config, server_request, session):
        provider = FacebookProvider(server_request, config, session)

        user = provider.map_user_to_object({"id": "10", "name": "Mark", "email": "m@fb.com"})

        assert user.avatar == "https://graph.facebook.com/v19.0/10/picture?type=normal"
        assert user.raw["avatar_original"].endswith("/10/picture?width=1920")
        assert user.nickname is None


class TestBitbucketProvider:
    @pytest.mark.asyncio
    async def test_primary_confirmed_email(self, config, server_request, session):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/2.0/user/emails":
                return httpx.Response(
                    200,
                    json={
                        "values": [
                            {"email": "unconfirmed@x.io", "is_primary": True, "is_confirmed": False},
                            {"email": "me@x.io", "is_primary": True, "is_confirmed": True},
                        ]
                    },
                )
            return httpx.Response(
                200,
                json={
                    "uuid": "{b1}",
                    "username": "bbuser",
                    "display_name": "BB User",
                    "links": {"avatar": {"href": "https://bitbucket.org/avatar.png"}},
                },
            )

        provider = BitbucketProvider(server_request, config, session)
        _mock_http(provider, handler)

        user = provider.map_user_to_object(await provider.get_user_by_token("bb_token"))

        assert user.id == "{b1}"
        assert user.nickname == "bbuser"
        assert user.name == "BB User"
        assert user.email == "me@x.io"
        assert user.avatar == "https://bitbucket.org/avatar.png"


class TestProfileMapping:
    def test_google(self, config, server_request, session):
        user = GoogleProvider(server_request, config, session).map_user_to_object(
            {
                "sub": "1098",
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "picture": "https://lh3.googleusercontent.com/a/pic",
            }
        )

        assert user.id == "1098"
        assert user.name == "Ada Lovelace"
        assert user.avatar == "https://lh3.googleusercontent.com/a/pic"

    def test_linkedin_builds_name_from_parts(self, config, server_request, session):
        user = LinkedInProvider(server_request, config, session).map_user_to_object(
            {"sub": "li-1", "given_name": "Grace", "family_name": "Hopper", "email": "g@h.io"}
        )

        assert user.id == "li-1"
        assert user.name == "Grace Hopper"
        assert user.nickname is None
