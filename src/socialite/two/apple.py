# two/apple.py

import json
import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx
from authlib.jose import JsonWebKey, jwt
from authlib.jose.errors import JoseError

from socialite.core.exceptions import AuthenticationError
from socialite.http.request import ServerRequest
from socialite.http.session import SessionInterface
from socialite.two.base import AbstractProvider
from socialite.user import User

logger = logging.getLogger(__name__)

APPLE_ISSUER = "https://appleid.apple.com"
CLIENT_SECRET_TTL_SECONDS = 3600


class AppleProvider(AbstractProvider):
    """
    OAuth 2.0 / OIDC provider for Sign in with Apple.

    Apple has no userinfo endpoint: identity comes from the signed id_token
    returned by the token endpoint, verified against Apple's published keys.
    The user's name is only sent once, as a JSON ``user`` form field on the
    very first login.

    The client secret is either a pre-generated JWT (``client_secret``) or is
    signed on the fly when ``team_id``, ``key_id`` and ``private_key`` are
    configured.
    """

    provider_name = "apple"
    AUTHORIZATION_URL = "https://appleid.apple.com/auth/authorize"
    TOKEN_URL = "https://appleid.apple.com/auth/token"
    KEYS_URL = "https://appleid.apple.com/auth/keys"
    DEFAULT_SCOPES = ["name", "email"]

    def __init__(
        self,
        request: ServerRequest,
        config: Mapping[str, Any],
        session: SessionInterface,
    ):
        super().__init__(request, config, session)
        if config.get("private_key") and config.get("team_id") and config.get("key_id"):
            self.client_secret = self.generate_client_secret()

    def generate_client_secret(self) -> str:
        now = int(time.time())
        header = {"alg": "ES256", "kid": self.config["key_id"]}
        payload = {
            "iss": self.config["team_id"],
            "iat": now,
            "exp": now + CLIENT_SECRET_TTL_SECONDS,
            "aud": APPLE_ISSUER,
            "sub": self.client_id,
        }
        token = jwt.encode(header, payload, self.config["private_key"])
        return token.decode() if isinstance(token, bytes) else token

    def get_code_fields(self) -> dict[str, Any]:
        # Apple requires form_post whenever name or email is requested
        if self.get_scopes():
            return {"response_mode": "form_post"}
        return {}

    async def get_user_from_token_response(self, token: dict[str, Any]) -> dict[str, Any]:
        id_token = token.get("id_token")
        if not id_token:
            raise AuthenticationError("No id_token received from apple")
        return await self.get_user_by_token(id_token)

    async def get_user_by_token(self, access_token: str) -> dict[str, Any]:
        """Verify an Apple id_token and return its claims merged with the posted user."""
        keys = await self.get_public_keys()
        claims = self.decode_id_token(access_token, keys)

        profile = dict(claims)
        posted_user = self.request.input("user")
        if posted_user:
            try:
                parsed = json.loads(posted_user)
            except ValueError:
                parsed = None

            if isinstance(parsed, dict):
                profile["user"] = parsed
            else:
                logger.warning("[apple] Ignoring malformed user payload in callback")

        return profile

    async def get_public_keys(self) -> dict[str, Any]:
        async with self.get_http_client() as client:
            try:
                response = await client.get(self.KEYS_URL)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPError as e:
                logger.error(f"[apple] Fetching public keys failed: {e}")
                raise AuthenticationError("Failed to fetch public keys from apple") from e

    def decode_id_token(self, id_token: str, keys: dict[str, Any]) -> dict[str, Any]:
        try:
            claims = jwt.decode(
                id_token,
                JsonWebKey.import_key_set(keys),
                claims_options={
                    "iss": {"essential": True, "value": APPLE_ISSUER},
                    "aud": {"essential": True, "value": self.client_id},
                    "sub": {"essential": True},
                },
            )
            claims.validate()
        except (JoseError, ValueError) as e:
            logger.error(f"[apple] id_token verification failed: {e}")
            raise AuthenticationError("Invalid id_token received from apple") from e
        return dict(claims)

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        name = None
        posted_user = raw_profile.get("user")
        posted_name = posted_user.get("name") if isinstance(posted_user, dict) else None
        if not isinstance(posted_name, dict):
            posted_name = {}
        parts = [posted_name.get("firstName"), posted_name.get("lastName")]
        parts = [p for p in parts if isinstance(p, str) and p]
        if parts:
            name = " ".join(parts)

        return User(
            id=str(raw_profile["sub"]),
            nickname=None,
            name=name,
            email=raw_profile.get("email"),
            avatar=None,
            raw=raw_profile,
        )
