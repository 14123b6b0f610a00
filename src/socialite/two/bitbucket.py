# two/bitbucket.py

import logging
from typing import Any

from socialite.core.exceptions import AuthenticationError
from socialite.two.base import AbstractProvider
from socialite.user import User

logger = logging.getLogger(__name__)


class BitbucketProvider(AbstractProvider):
    """OAuth 2.0 provider for Bitbucket Cloud."""

    provider_name = "bitbucket"
    AUTHORIZATION_URL = "https://bitbucket.org/site/oauth2/authorize"
    TOKEN_URL = "https://bitbucket.org/site/oauth2/access_token"
    USERINFO_URL = "https://api.bitbucket.org/2.0/user"
    EMAILS_URL = "https://api.bitbucket.org/2.0/user/emails"
    DEFAULT_SCOPES = ["email"]
    # Bitbucket expects the client credentials as HTTP basic auth
    TOKEN_ENDPOINT_AUTH_METHOD = "client_secret_basic"

    async def get_user_by_token(self, access_token: str) -> dict[str, Any]:
        profile = await self.get_json(self.USERINFO_URL, access_token)

        if "email" in self.get_scopes():
            try:
                profile["email"] = await self.get_email_by_token(access_token)
            except AuthenticationError as e:
                logger.warning(f"[bitbucket] Could not fetch user emails: {e}")

        return profile

    async def get_email_by_token(self, access_token: str) -> str | None:
        emails = await self.get_json(self.EMAILS_URL, access_token)
        return next(
            (
                e["email"]
                for e in emails.get("values", [])
                if e.get("is_primary") and e.get("is_confirmed")
            ),
            None,
        )

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        avatar = raw_profile.get("links", {}).get("avatar", {}).get("href")
        return User(
            id=str(raw_profile["uuid"]),
            nickname=raw_profile.get("username") or raw_profile.get("nickname"),
            name=raw_profile.get("display_name"),
            email=raw_profile.get("email"),
            avatar=avatar,
            raw=raw_profile,
        )
