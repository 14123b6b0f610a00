"""Pytest configuration and fixtures"""

from typing import Any

import pytest

from socialite.http.request import ServerRequest
from socialite.http.session import Session


@pytest.fixture
def config() -> dict[str, Any]:
    return {
        "client_id": "abc",
        "client_secret": "s3c",
        "redirect": "https://example.com/auth/callback",
    }


@pytest.fixture
def server_request() -> ServerRequest:
    return ServerRequest(method="GET", url="https://example.com/auth/callback")


@pytest.fixture
def session() -> Session:
    return Session()

