from socialite.http.request import ServerRequest, bind_request, get_current_request
from socialite.http.session import (
    Session,
    SessionInterface,
    StarletteSession,
    bind_session,
    get_current_session,
)

__all__ = [
    "ServerRequest",
    "Session",
    "SessionInterface",
    "StarletteSession",
    "bind_request",
    "bind_session",
    "get_current_request",
    "get_current_session",
]
