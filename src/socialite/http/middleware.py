import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from socialite.http.request import ServerRequest, bind_request
from socialite.http.session import StarletteSession, bind_session

logger = logging.getLogger(__name__)


class SocialiteMiddleware(BaseHTTPMiddleware):
    """
    Bind a snapshot of every HTTP request (and its starlette session, when
    SessionMiddleware runs before this one) to the current context.

    ``SocialiteManager`` instances created without an explicit request or
    session resolve these bindings, so one manager can be shared by
    concurrent requests.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        snapshot = await ServerRequest.from_starlette(request)

        with bind_request(snapshot):
            if "session" in request.scope:
                with bind_session(StarletteSession(request.session)):
                    return await call_next(request)

            logger.debug("No starlette session in scope; providers will use a fresh Session")
            return await call_next(request)
