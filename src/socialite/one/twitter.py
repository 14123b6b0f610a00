# one/twitter.py

from typing import Any

from socialite.one.base import AbstractProvider
from socialite.user import User


class TwitterProvider(AbstractProvider):
    """OAuth 1.0a provider for Twitter / X, backed by ``TwitterServer``."""

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        """
        Twitter verify_credentials fields:
            id_str                  → unique user ID (string form)
            screen_name             → handle
            name                    → display name
            email                   → only with "Request email" app permission
            profile_image_url_https → avatar
        """
        avatar = raw_profile.get("profile_image_url_https")
        return User(
            id=str(raw_profile.get("id_str") or raw_profile["id"]),
            nickname=raw_profile.get("screen_name"),
            name=raw_profile.get("name"),
            email=raw_profile.get("email"),
            avatar=avatar,
            raw={
                **raw_profile,
                "avatar_original": avatar.replace("_normal", "") if avatar else None,
            },
        )
