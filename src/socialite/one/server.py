"""
OAuth 1.0a signing-client wrappers.

A ``Server`` holds one provider's endpoints and the application credentials,
and performs the three-legged exchange through authlib's ``AsyncOAuth1Client``.
It is configured with the OAuth1 vocabulary:

    identifier   : consumer key
    secret       : consumer secret
    callback_uri : where the provider sends the user back
"""

import logging
from abc import ABC
from collections.abc import Mapping
from typing import Any

from authlib.integrations.httpx_client import AsyncOAuth1Client

from socialite.core.config import settings
from socialite.core.exceptions import AuthenticationError, InvalidConfigurationError

logger = logging.getLogger(__name__)


class Server(ABC):
    # Subclasses must define these
    name: str = ""
    TEMPORARY_CREDENTIALS_URL: str = ""
    AUTHORIZATION_URL: str = ""
    TOKEN_CREDENTIALS_URL: str = ""
    USER_DETAILS_URL: str = ""
    USER_DETAILS_PARAMS: dict[str, str] = {}

    def __init__(self, config: Mapping[str, Any]):
        if not config.get("identifier") or not config.get("secret"):
            raise InvalidConfigurationError("identifier/secret is required")

        self.config = dict(config)
        self.identifier: str = config["identifier"]
        self.secret: str = config["secret"]
        self.callback_uri: str | None = config.get("callback_uri")

    def get_client(
        self, token: str | None = None, token_secret: str | None = None
    ) -> AsyncOAuth1Client:
        """Create a fresh signing client, optionally bound to a token pair."""
        return AsyncOAuth1Client(
            client_id=self.identifier,
            client_secret=self.secret,
            token=token,
            token_secret=token_secret,
            redirect_uri=self.callback_uri,
            timeout=settings.HTTP_TIMEOUT,
        )

    async def get_temporary_credentials(self) -> dict[str, Any]:
        """Leg 1: obtain a request token bound to the callback URI."""
        async with self.get_client() as client:
            try:
                token = await client.fetch_request_token(self.TEMPORARY_CREDENTIALS_URL)
                return dict(token)
            except Exception as e:
                logger.error(f"[{self.name}] Temporary credentials request failed: {e}")
                raise AuthenticationError(
                    f"Failed to obtain temporary credentials from {self.name}"
                ) from e

    async def get_authorization_url(self, temporary_credentials: Mapping[str, Any]) -> str:
        """Leg 2: where the user approves the request token."""
        async with self.get_client() as client:
            return client.create_authorization_url(
                self.AUTHORIZATION_URL,
                request_token=temporary_credentials["oauth_token"],
            )

    async def get_token_credentials(
        self, temporary_credentials: Mapping[str, Any], verifier: str
    ) -> dict[str, Any]:
        """Leg 3: swap the approved request token for token credentials."""
        async with self.get_client(
            temporary_credentials["oauth_token"],
            temporary_credentials.get("oauth_token_secret"),
        ) as client:
            try:
                token = await client.fetch_access_token(
                    self.TOKEN_CREDENTIALS_URL, verifier=verifier
                )
                return dict(token)
            except Exception as e:
                logger.error(f"[{self.name}] Token credentials request failed: {e}")
                raise AuthenticationError(
                    f"Failed to obtain token credentials from {self.name}"
                ) from e

    async def get_user_details(self, token: str, token_secret: str) -> dict[str, Any]:
        """Fetch the raw profile with a signed request."""
        async with self.get_client(token, token_secret) as client:
            try:
                response = await client.get(self.USER_DETAILS_URL, params=self.USER_DETAILS_PARAMS)
                response.raise_for_status()
                return response.json()
            except Exception as e:
                logger.error(f"[{self.name}] User details request failed: {e}")
                raise AuthenticationError(
                    f"Failed to fetch user profile from {self.name}"
                ) from e


class TwitterServer(Server):
    name = "twitter"
    TEMPORARY_CREDENTIALS_URL = "https://api.twitter.com/oauth/request_token"
    AUTHORIZATION_URL = "https://api.twitter.com/oauth/authenticate"
    TOKEN_CREDENTIALS_URL = "https://api.twitter.com/oauth/access_token"
    USER_DETAILS_URL = "https://api.twitter.com/1.1/account/verify_credentials.json"
    USER_DETAILS_PARAMS = {"include_email": "true", "skip_status": "true"}
