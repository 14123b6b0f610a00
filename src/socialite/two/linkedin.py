# two/linkedin.py

from typing import Any

from socialite.two.base import AbstractProvider
from socialite.user import User


class LinkedInProvider(AbstractProvider):
    """OAuth 2.0 provider for "Sign In with LinkedIn using OpenID Connect"."""

    provider_name = "linkedin"
    AUTHORIZATION_URL = "https://www.linkedin.com/oauth/v2/authorization"
    TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
    USERINFO_URL = "https://api.linkedin.com/v2/userinfo"
    DEFAULT_SCOPES = ["openid", "profile", "email"]

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        name = raw_profile.get("name")
        if not name:
            parts = [raw_profile.get("given_name"), raw_profile.get("family_name")]
            name = " ".join(p for p in parts if p) or None

        return User(
            id=str(raw_profile["sub"]),
            nickname=None,
            name=name,
            email=raw_profile.get("email"),
            avatar=raw_profile.get("picture"),
            raw=raw_profile,
        )
