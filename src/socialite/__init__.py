from socialite.contracts import Provider
from socialite.core.exceptions import (
    AuthenticationError,
    InvalidConfigurationError,
    InvalidStateError,
    SocialiteException,
    UnsupportedDriverError,
)
from socialite.http.request import ServerRequest
from socialite.http.session import Session, SessionInterface, StarletteSession
from socialite.manager import SocialiteManager
from socialite.user import User

__version__ = "1.0.0"

__all__ = [
    "AuthenticationError",
    "InvalidConfigurationError",
    "InvalidStateError",
    "Provider",
    "ServerRequest",
    "Session",
    "SessionInterface",
    "SocialiteException",
    "SocialiteManager",
    "StarletteSession",
    "UnsupportedDriverError",
    "User",
]
