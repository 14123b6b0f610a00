from fastapi import Request

from socialite.http.request import ServerRequest
from socialite.http.session import Session, SessionInterface, StarletteSession


async def get_request_snapshot(request: Request) -> ServerRequest:
    return await ServerRequest.from_starlette(request)


def get_session_store(request: Request) -> SessionInterface:
    """Starlette session when SessionMiddleware is installed, else a throwaway store."""
    if "session" in request.scope:
        return StarletteSession(request.session)
    return Session()
