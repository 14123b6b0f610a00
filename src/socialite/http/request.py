"""
Read-only snapshot of the inbound HTTP request.

Providers only ever need to read the callback parameters, so the snapshot is
a frozen copy taken once per request rather than a live framework object.
The snapshot for the current request can be bound to the running context
(see ``SocialiteMiddleware``); ``ServerRequest.from_globals()`` picks it up
from there and falls back to CGI-style process environment variables.
"""

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl, urlencode

from starlette.requests import Request

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

_current_request: ContextVar["ServerRequest | None"] = ContextVar(
    "socialite_current_request", default=None
)


def _freeze(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class ServerRequest:
    method: str = "GET"
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, Any] = field(default_factory=dict)
    server: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(
            self, "headers", _freeze({k.lower(): v for k, v in self.headers.items()})
        )
        object.__setattr__(self, "query_params", _freeze(self.query_params))
        object.__setattr__(self, "form", _freeze(self.form))
        object.__setattr__(self, "server", _freeze(self.server))

    def query(self, key: str, default: Any = None) -> Any:
        return self.query_params.get(key, default)

    def input(self, key: str, default: Any = None) -> Any:
        """Look a parameter up in the query string first, then the form body."""
        if key in self.query_params:
            return self.query_params[key]
        return self.form.get(key, default)

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    async def from_starlette(cls, request: Request) -> "ServerRequest":
        """Snapshot a starlette/FastAPI request, parsing form bodies."""
        form: dict[str, Any] = {}
        content_type = request.headers.get("content-type", "")
        if request.method in ("POST", "PUT", "PATCH") and content_type.startswith(
            _FORM_CONTENT_TYPES
        ):
            # Cache the raw body first so downstream handlers can still read it
            await request.body()
            form_data = await request.form()
            form = {key: value for key, value in form_data.items() if isinstance(value, str)}

        client = request.client
        server = {
            "SERVER_PROTOCOL": f"HTTP/{request.scope.get('http_version', '1.1')}",
            "REQUEST_METHOD": request.method,
            "REQUEST_URI": request.url.path
            + (f"?{request.url.query}" if request.url.query else ""),
            "QUERY_STRING": request.url.query,
            "REMOTE_ADDR": client.host if client else None,
            "SERVER_NAME": request.url.hostname,
            "SERVER_PORT": request.url.port,
            "HTTPS": "on" if request.url.scheme == "https" else "off",
        }

        return cls(
            method=request.method,
            url=str(request.url),
            headers=dict(request.headers),
            query_params=dict(request.query_params),
            form=form,
            server=server,
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "ServerRequest":
        """Build a snapshot from a WSGI/CGI style variable mapping."""
        headers = {
            key[5:].replace("_", "-").lower(): str(value)
            for key, value in environ.items()
            if key.startswith("HTTP_")
        }
        for key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
            if environ.get(key):
                headers[key.replace("_", "-").lower()] = str(environ[key])

        query_string = str(environ.get("QUERY_STRING", ""))
        query_params = dict(parse_qsl(query_string, keep_blank_values=True))

        scheme = "https" if str(environ.get("HTTPS", "off")).lower() in ("on", "1") else "http"
        host = headers.get("host") or str(environ.get("SERVER_NAME", ""))
        path = str(environ.get("PATH_INFO") or environ.get("SCRIPT_NAME") or "")
        url = f"{scheme}://{host}{path}" if host else path
        if query_string:
            url = f"{url}?{urlencode(query_params)}"

        return cls(
            method=str(environ.get("REQUEST_METHOD", "GET")),
            url=url,
            headers=headers,
            query_params=query_params,
            server=dict(environ),
        )

    @classmethod
    def from_globals(cls) -> "ServerRequest":
        """
        Snapshot the ambient request.

        Returns the request bound to the current context when there is one,
        otherwise a fresh snapshot of the process environment.
        """
        bound = _current_request.get()
        if bound is not None:
            return bound
        return cls.from_environ(os.environ)


def get_current_request() -> ServerRequest | None:
    return _current_request.get()


@contextmanager
def bind_request(request: ServerRequest) -> Iterator[ServerRequest]:
    """Bind ``request`` as the ambient request for the enclosed block."""
    token = _current_request.set(request)
    try:
        yield request
    finally:
        _current_request.reset(token)
