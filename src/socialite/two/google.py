# two/google.py

from typing import Any

from socialite.two.base import AbstractProvider
from socialite.user import User

# Standard claim keys
CLAIM_SUB = "sub"
CLAIM_EMAIL = "email"
CLAIM_NAME = "name"
CLAIM_NICKNAME = "nickname"
CLAIM_PICTURE = "picture"


class GoogleProvider(AbstractProvider):
    """
    OAuth 2.0 / OIDC provider for Google Sign-In.

    Scopes requested:
        openid  — enables OIDC id_token
        profile — name, picture, locale
        email   — user's email address
    """

    provider_name = "google"
    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
    DEFAULT_SCOPES = ["openid", "profile", "email"]

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        return User(
            id=str(raw_profile[CLAIM_SUB]),
            nickname=raw_profile.get(CLAIM_NICKNAME),
            name=raw_profile.get(CLAIM_NAME),
            email=raw_profile.get(CLAIM_EMAIL),
            avatar=raw_profile.get(CLAIM_PICTURE),
            raw=raw_profile,
        )
