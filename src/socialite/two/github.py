# two/github.py

import logging
from typing import Any

from socialite.core.exceptions import AuthenticationError
from socialite.two.base import AbstractProvider
from socialite.user import User

logger = logging.getLogger(__name__)


class GithubProvider(AbstractProvider):
    """
    OAuth 2.0 provider for GitHub login.

    The user's primary email may not be in the /user endpoint if it's set to
    private, so a separate call to /user/emails fills it in.
    """

    provider_name = "github"
    AUTHORIZATION_URL = "https://github.com/login/oauth/authorize"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    USERINFO_URL = "https://api.github.com/user"
    EMAILS_URL = "https://api.github.com/user/emails"
    DEFAULT_SCOPES = ["user:email"]

    API_HEADERS = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }

    async def get_user_by_token(self, access_token: str) -> dict[str, Any]:
        profile = await self.get_json(self.USERINFO_URL, access_token, headers=self.API_HEADERS)

        if not profile.get("email") and "user:email" in self.get_scopes():
            try:
                profile["email"] = await self.get_primary_email(access_token)
            except AuthenticationError as e:
                logger.warning(f"[github] Could not fetch user emails: {e}")

        return profile

    async def get_primary_email(self, access_token: str) -> str | None:
        emails = await self.get_json(self.EMAILS_URL, access_token, headers=self.API_HEADERS)
        return next(
            (e["email"] for e in emails if e.get("primary") and e.get("verified")),
            None,
        )

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        """
        GitHub user fields:
            id         → unique GitHub user ID (integer)
            login      → GitHub username
            name       → full display name
            email      → may be null for private accounts
            avatar_url → avatar
        """
        return User(
            id=str(raw_profile["id"]),
            nickname=raw_profile.get("login"),
            name=raw_profile.get("name"),
            email=raw_profile.get("email"),
            avatar=raw_profile.get("avatar_url"),
            raw=raw_profile,
        )
