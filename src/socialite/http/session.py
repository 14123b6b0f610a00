"""
Session stores used by providers to carry OAuth state across the redirect.

OAuth2 providers keep the ``state`` value here; OAuth1 providers keep the
temporary credentials issued before the user is sent to the provider.
"""

from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Protocol, runtime_checkable

_MISSING = object()

_current_session: ContextVar["SessionInterface | None"] = ContextVar(
    "socialite_current_session", default=None
)


@runtime_checkable
class SessionInterface(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> Any: ...


class Session:
    """In-memory session store. Each instance is independent."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> Any:
        return self._data.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._data

    def all(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(keys={sorted(self._data)})"


class StarletteSession:
    """
    Adapter over ``request.session`` from starlette's SessionMiddleware.

    Values must be JSON serializable since starlette signs the session into
    a cookie.
    """

    def __init__(self, store: MutableMapping[str, Any]):
        self._store = store

    def get(self, key: str, default: Any = None) -> Any:
        return self._store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._store[key] = value

    def remove(self, key: str) -> Any:
        value = self._store.pop(key, _MISSING)
        return None if value is _MISSING else value


def get_current_session() -> SessionInterface | None:
    return _current_session.get()


@contextmanager
def bind_session(session: SessionInterface) -> Iterator[SessionInterface]:
    """Bind ``session`` as the ambient session for the enclosed block."""
    token = _current_session.set(session)
    try:
        yield session
    finally:
        _current_session.reset(token)
