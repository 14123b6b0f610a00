# two/base.py

import logging
import secrets
from collections.abc import Mapping
from typing import Any

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client
from starlette.responses import RedirectResponse

from socialite.contracts import Provider
from socialite.core.config import settings
from socialite.core.exceptions import AuthenticationError, InvalidStateError
from socialite.http.request import ServerRequest
from socialite.http.session import SessionInterface
from socialite.user import User

logger = logging.getLogger(__name__)


class AbstractProvider(Provider):
    """
    Base class for all OAuth 2.0 / OIDC social login providers.

    Each provider subclasses this and only needs to define its endpoints and
    how to turn the provider's raw profile into a ``User``.

    Flow:
        1. redirect()  — store a state value, redirect the user to the provider
        2. user()      — verify state, exchange code for tokens, fetch profile
    """

    # Subclasses must define these
    provider_name: str = ""
    AUTHORIZATION_URL: str = ""
    TOKEN_URL: str = ""
    USERINFO_URL: str = ""
    DEFAULT_SCOPES: list[str] = []
    SCOPE_SEPARATOR: str = " "
    TOKEN_ENDPOINT_AUTH_METHOD: str = "client_secret_post"

    STATE_SESSION_KEY = "state"

    def __init__(
        self,
        request: ServerRequest,
        config: Mapping[str, Any],
        session: SessionInterface,
    ):
        self.request = request
        self.config = config
        self.session = session

        self.client_id: str = config.get("client_id", "")
        self.client_secret: str = config.get("client_secret", "")
        self.redirect_uri: str = config.get("redirect", "")

        self._scopes: list[str] = list(self.DEFAULT_SCOPES)
        self._parameters: dict[str, Any] = {}
        self._stateless = False

        configured_scopes = config.get("scopes")
        if configured_scopes:
            self.scopes(configured_scopes)

    # -------------------------------------------------------------------------
    # Fluent configuration
    # -------------------------------------------------------------------------

    def scopes(self, scopes: str | list[str]) -> "AbstractProvider":
        """Merge extra scopes into the requested set."""
        if isinstance(scopes, str):
            scopes = [s for s in scopes.replace(",", " ").split() if s]
        for scope in scopes:
            if scope not in self._scopes:
                self._scopes.append(scope)
        return self

    def set_scopes(self, scopes: str | list[str]) -> "AbstractProvider":
        """Replace the requested scopes."""
        self._scopes = []
        return self.scopes(scopes)

    def get_scopes(self) -> list[str]:
        return list(self._scopes)

    def with_(self, parameters: Mapping[str, Any]) -> "AbstractProvider":
        """Extra query parameters for the authorization request."""
        self._parameters.update(parameters)
        return self

    def stateless(self) -> "AbstractProvider":
        self._stateless = True
        return self

    @property
    def is_stateless(self) -> bool:
        return self._stateless

    # -------------------------------------------------------------------------
    # Endpoints (override when they depend on configuration)
    # -------------------------------------------------------------------------

    def get_auth_url(self) -> str:
        return self.AUTHORIZATION_URL

    def get_token_url(self) -> str:
        return self.TOKEN_URL

    def get_code_fields(self) -> dict[str, Any]:
        """Provider specific parameters added to the authorization request."""
        return {}

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def get_oauth_client(self) -> AsyncOAuth2Client:
        """Create a fresh async OAuth2 client for this provider."""
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
            token_endpoint_auth_method=self.TOKEN_ENDPOINT_AUTH_METHOD,
            timeout=settings.HTTP_TIMEOUT,
        )

    def get_http_client(self) -> httpx.AsyncClient:
        """Plain client for profile lookups."""
        return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    # -------------------------------------------------------------------------
    # Step 1: redirect
    # -------------------------------------------------------------------------

    async def redirect(self) -> RedirectResponse:
        state = None
        if not self._stateless:
            state = secrets.token_urlsafe(32)
            self.session.set(self.STATE_SESSION_KEY, state)

        url = await self.get_authorization_url(state)
        logger.debug(f"[{self.provider_name}] Redirecting to authorization page")
        return RedirectResponse(url=url, status_code=302)

    async def get_authorization_url(self, state: str | None) -> str:
        params: dict[str, Any] = {**self.get_code_fields(), **self._parameters}
        if state is not None:
            params["state"] = state

        async with self.get_oauth_client() as client:
            uri, _ = client.create_authorization_url(
                self.get_auth_url(),
                scope=self.SCOPE_SEPARATOR.join(self._scopes),
                **params,
            )
            return uri

    # -------------------------------------------------------------------------
    # Step 2: callback
    # -------------------------------------------------------------------------

    def has_invalid_state(self) -> bool:
        if self._stateless:
            return False

        # One-time use
        expected = self.session.remove(self.STATE_SESSION_KEY)
        received = self.request.input("state")

        if not expected or not received:
            return True
        return not secrets.compare_digest(str(received), str(expected))

    def get_code(self) -> str | None:
        return self.request.input("code")

    async def user(self) -> User:
        if self.has_invalid_state():
            raise InvalidStateError()

        error = self.request.input("error")
        if error:
            description = self.request.input("error_description") or error
            raise AuthenticationError(
                f"Authorization denied by {self.provider_name}: {description}",
                details={"error": error},
            )

        code = self.get_code()
        if not code:
            raise AuthenticationError("Authorization code is required")

        token = await self.get_access_token_response(code)

        access_token = token.get("access_token")
        if not access_token:
            raise AuthenticationError(f"No access token received from {self.provider_name}")

        raw_profile = await self.get_user_from_token_response(token)
        user = self.map_user_to_object(raw_profile)

        return (
            user.set_token(access_token)
            .set_refresh_token(token.get("refresh_token"))
            .set_expires_in(token.get("expires_in"))
            .set_approved_scopes(self.parse_approved_scopes(token.get("scope")))
        )

    async def user_from_token(self, access_token: str) -> User:
        """Resolve a user from an access token obtained elsewhere."""
        raw_profile = await self.get_user_by_token(access_token)
        return self.map_user_to_object(raw_profile).set_token(access_token)

    async def get_access_token_response(self, code: str) -> dict[str, Any]:
        """Exchange the authorization code for provider tokens."""
        async with self.get_oauth_client() as client:
            try:
                token = await client.fetch_token(
                    self.get_token_url(),
                    code=code,
                    grant_type="authorization_code",
                )
                return dict(token)
            except Exception as e:
                logger.error(f"[{self.provider_name}] Token exchange failed: {e}")
                raise AuthenticationError(
                    f"Failed to exchange authorization code with {self.provider_name}"
                ) from e

    async def get_user_from_token_response(self, token: dict[str, Any]) -> dict[str, Any]:
        return await self.get_user_by_token(token["access_token"])

    async def get_user_by_token(self, access_token: str) -> dict[str, Any]:
        """Fetch the raw profile. Defaults to a bearer GET on USERINFO_URL."""
        return await self.get_json(self.USERINFO_URL, access_token)

    async def get_json(
        self,
        url: str,
        access_token: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        async with self.get_http_client() as client:
            try:
                response = await client.get(
                    url,
                    headers={"Authorization": f"Bearer {access_token}", **(headers or {})},
                    params=params,
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPError as e:
                logger.error(f"[{self.provider_name}] Request to {url} failed: {e}")
                raise AuthenticationError(
                    f"Failed to fetch user profile from {self.provider_name}"
                ) from e

    def parse_approved_scopes(self, scope: Any) -> list[str]:
        if not scope:
            return []
        if isinstance(scope, (list, tuple)):
            return [str(s) for s in scope]
        # Providers disagree on separators (GitHub answers with commas)
        return str(scope).replace(",", " ").split()

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        """
        Map provider-specific profile data onto ``User``.

        Subclasses MUST override this.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement map_user_to_object()")
