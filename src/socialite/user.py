from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    """Normalized user returned by every provider."""

    id: str
    nickname: str | None = None
    name: str | None = None
    email: str | None = None
    avatar: str | None = None

    # OAuth2 credentials
    token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    approved_scopes: list[str] = Field(default_factory=list)

    # OAuth1 credentials
    token_secret: str | None = None

    raw: dict[str, Any] = Field(default_factory=dict)

    def set_token(self, token: str | None) -> "User":
        self.token = token
        return self

    def set_refresh_token(self, refresh_token: str | None) -> "User":
        self.refresh_token = refresh_token
        return self

    def set_expires_in(self, expires_in: int | None) -> "User":
        self.expires_in = int(expires_in) if expires_in is not None else None
        return self

    def set_approved_scopes(self, scopes: list[str]) -> "User":
        self.approved_scopes = list(scopes)
        return self

    def public_profile(self) -> dict[str, Any]:
        """Profile fields without provider credentials."""
        return self.model_dump(include={"id", "nickname", "name", "email", "avatar"})
