"""
Shared fixtures: a Settings object and a fake Unipile API.

The fake is an httpx.MockTransport that records every request, so tests can
assert which endpoints were hit and with which x-api-key.
"""

import httpx
import pytest

from core.config import Settings
from core.messaging import build_registry
from core.unipile_client import UnipileClient

BASE_URL = "https://api.unipile.test/api/v1"


class FakeUnipile:
    """Routes GET requests to canned (status, json) responses by path."""

    def __init__(self):
        self.routes: dict[str, tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Exception | None = None

    def reply(self, path: str, body: object, status: int = 200) -> None:
        self.routes[path] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        path = request.url.path.removeprefix("/api/v1")
        if path not in self.routes:
            return httpx.Response(404, json={"message": f"no route for {path}"})
        status, body = self.routes[path]
        if isinstance(body, (str, bytes)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/api/v1") for r in self.requests]

    @property
    def api_keys(self) -> list[str]:
        return [r.headers.get("x-api-key") for r in self.requests]


@pytest.fixture
def settings():
    return Settings(base_url=BASE_URL, default_api_key="default-key")


@pytest.fixture
def keyless_settings():
    return Settings(base_url=BASE_URL)


@pytest.fixture
def fake_unipile():
    return FakeUnipile()


@pytest.fixture
def client(settings, fake_unipile):
    return UnipileClient(settings, transport=httpx.MockTransport(fake_unipile.handler))


@pytest.fixture
def registry(settings, client):
    return build_registry(settings, client)


@pytest.fixture
def sample_accounts():
    return [
        {"id": "li-1", "name": "Work LinkedIn", "type": "LINKEDIN", "provider": "LINKEDIN", "status": "OK"},
        {"id": "out-1", "email": "me@outlook.com", "type": "GOOGLE_OAUTH"},
        {"id": "mail-1", "email": "me@gmail.com", "type": "MAIL"},
        {"id": "gmail-1", "email": "alex@gmail.com", "type": "GOOGLE_OAUTH", "status": "OK"},
        {"id": "gmail-2", "email": "other@gmail.com", "type": "GOOGLE_OAUTH"},
    ]
