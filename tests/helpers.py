from typing import Any
from urllib.parse import parse_qs, urlparse

from socialite.http.request import ServerRequest


def callback_request(**params: Any) -> ServerRequest:
    """A GET callback carrying ``params`` in the query string."""
    return ServerRequest(
        method="GET",
        url="https://example.com/auth/callback",
        query_params={k: str(v) for k, v in params.items()},
    )


def query_of(url: str) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}
