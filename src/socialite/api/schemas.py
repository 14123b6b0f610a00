from pydantic import BaseModel


class SocialUserResponse(BaseModel):
    """Returned after a successful social login callback."""

    provider: str
    id: str
    nickname: str | None = None
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    approved_scopes: list[str] = []


class DriverListResponse(BaseModel):
    drivers: list[str]
    configured: list[str]
