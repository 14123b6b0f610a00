# one/base.py

import logging
from typing import Any

from starlette.responses import RedirectResponse

from socialite.contracts import Provider
from socialite.core.exceptions import AuthenticationError, InvalidStateError
from socialite.http.request import ServerRequest
from socialite.http.session import SessionInterface
from socialite.one.server import Server
from socialite.user import User

logger = logging.getLogger(__name__)


class AbstractProvider(Provider):
    """
    Base class for OAuth 1.0a social login providers.

    The protocol work is done by a ``Server``; this class keeps the temporary
    credentials in the session between the redirect and the callback.

    Flow:
        1. redirect()  — fetch temporary credentials, store them, redirect
        2. user()      — match the returned token, fetch token credentials + profile
    """

    TEMP_SESSION_KEY = "oauth.temp"

    def __init__(self, request: ServerRequest, server: Server, session: SessionInterface):
        self.request = request
        self.server = server
        self.session = session

    @property
    def provider_name(self) -> str:
        return self.server.name

    async def redirect(self) -> RedirectResponse:
        temp = await self.server.get_temporary_credentials()
        self.session.set(
            self.TEMP_SESSION_KEY,
            {
                "oauth_token": temp["oauth_token"],
                "oauth_token_secret": temp.get("oauth_token_secret"),
            },
        )

        url = await self.server.get_authorization_url(temp)
        logger.debug(f"[{self.provider_name}] Redirecting to authorization page")
        return RedirectResponse(url=url, status_code=302)

    def has_necessary_verifier(self) -> bool:
        return bool(self.request.query("oauth_token") and self.request.query("oauth_verifier"))

    async def get_token(self) -> dict[str, Any]:
        """Swap the approved request token for token credentials (one-time use)."""
        temp = self.session.remove(self.TEMP_SESSION_KEY)
        if not temp or temp.get("oauth_token") != self.request.query("oauth_token"):
            raise InvalidStateError("OAuth token does not match the stored temporary credentials")

        return await self.server.get_token_credentials(temp, self.request.query("oauth_verifier"))

    async def user(self) -> User:
        if self.request.query("denied"):
            raise AuthenticationError(f"Authorization denied by {self.provider_name}")

        if not self.has_necessary_verifier():
            raise AuthenticationError("Invalid request. Missing OAuth verifier.")

        token = await self.get_token()
        return await self.user_from_token_and_secret(
            token["oauth_token"], token["oauth_token_secret"]
        )

    async def user_from_token_and_secret(self, token: str, secret: str) -> User:
        """Resolve a user from token credentials obtained elsewhere."""
        raw_profile = await self.server.get_user_details(token, secret)
        user = self.map_user_to_object(raw_profile)
        user.token = token
        user.token_secret = secret
        return user

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        """
        Map provider-specific profile data onto ``User``.

        Subclasses MUST override this.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement map_user_to_object()")
