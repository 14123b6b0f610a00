# two/facebook.py

import hashlib
import hmac
from collections.abc import Mapping
from typing import Any

from socialite.http.request import ServerRequest
from socialite.http.session import SessionInterface
from socialite.two.base import AbstractProvider
from socialite.user import User

GRAPH_URL = "https://graph.facebook.com"
DEFAULT_GRAPH_VERSION = "v19.0"
DEFAULT_FIELDS = ["name", "email", "gender", "verified", "link"]


class FacebookProvider(AbstractProvider):
    """
    OAuth 2.0 provider for Facebook Login.

    Optional configuration keys:
        graph_version : Graph API version, e.g. "v19.0"
        fields        : profile fields requested from /me
        popup         : render the login dialog as a popup
    """

    provider_name = "facebook"
    DEFAULT_SCOPES = ["email"]
    SCOPE_SEPARATOR = ","

    def __init__(
        self,
        request: ServerRequest,
        config: Mapping[str, Any],
        session: SessionInterface,
    ):
        super().__init__(request, config, session)
        self.graph_version: str = config.get("graph_version", DEFAULT_GRAPH_VERSION)
        self.fields: list[str] = list(config.get("fields", DEFAULT_FIELDS))
        self.popup: bool = bool(config.get("popup", False))
        self.re_request = False

    def as_popup(self) -> "FacebookProvider":
        self.popup = True
        return self

    def re_request_permissions(self) -> "FacebookProvider":
        """Ask again for permissions the user declined earlier."""
        self.re_request = True
        return self

    def get_auth_url(self) -> str:
        return f"https://www.facebook.com/{self.graph_version}/dialog/oauth"

    def get_token_url(self) -> str:
        return f"{GRAPH_URL}/{self.graph_version}/oauth/access_token"

    def get_code_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if self.popup:
            fields["display"] = "popup"
        if self.re_request:
            fields["auth_type"] = "rerequest"
        return fields

    def appsecret_proof(self, access_token: str) -> str:
        return hmac.new(
            self.client_secret.encode(), access_token.encode(), hashlib.sha256
        ).hexdigest()

    async def get_user_by_token(self, access_token: str) -> dict[str, Any]:
        params = {
            "fields": ",".join(self.fields),
            "appsecret_proof": self.appsecret_proof(access_token),
        }
        return await self.get_json(
            f"{GRAPH_URL}/{self.graph_version}/me", access_token, params=params
        )

    def map_user_to_object(self, raw_profile: dict[str, Any]) -> User:
        user_id = str(raw_profile["id"])
        avatar_base = f"{GRAPH_URL}/{self.graph_version}/{user_id}/picture"
        return User(
            id=user_id,
            nickname=None,
            name=raw_profile.get("name"),
            email=raw_profile.get("email"),
            avatar=f"{avatar_base}?type=normal",
            raw={**raw_profile, "avatar_original": f"{avatar_base}?width=1920"},
        )
