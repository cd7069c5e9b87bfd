"""Root conftest — fake platform backend, SDK and FastAPI test clients.

Invariants:
    - No test reaches the network: every SDK call goes through httpx.MockTransport
    - FakeBackend records every request in order and answers by (method, path)
    - Unregistered (method, path) pairs answer 404
    - get_sdk is overridden per app; overrides cleared after each test

Design Decisions:
    - One queue per (method, path): responses are consumed in order and the
      last one sticks, so "201 then 400" scripts a partial bulk import
    - ASGITransport(raise_app_exceptions=False) so the catch-all handler's
      500 page is what the client sees
"""

import os

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Settings must not pick up a developer's environment
for _key in [k for k in os.environ if k.startswith("MF_")]:
    del os.environ[_key]

from gui.config import Settings  # noqa: E402
from gui.infrastructure.sdk_manager import get_sdk  # noqa: E402
from gui.main import create_app  # noqa: E402
from gui.sdk.client import PlatformSDK  # noqa: E402

TOKEN = "user-access-token"
REFRESH = "user-refresh-token"


class FakeBackend:
    """httpx.MockTransport handler standing in for every platform service."""

    def __init__(self):
        self.routes: dict[tuple[str, str], list[tuple]] = {}
        self.requests: list[httpx.Request] = []
        self.down = False

    def on(self, method, path, status=200, json=None, headers=None):
        self.routes.setdefault((method, path), []).append((status, json, headers))
        return self

    def calls(self, method, path) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == path
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "entity not found"})
        status, body, headers = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(status, json=body, headers=headers)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def sdk(settings, backend):
    platform = PlatformSDK.from_settings(
        settings, transport=httpx.MockTransport(backend),
    )
    yield platform
    await platform.aclose()


@pytest.fixture
def app(sdk):
    application = create_app()
    application.dependency_overrides[get_sdk] = lambda: sdk
    yield application
    application.dependency_overrides.clear()


def _client(app, cookies=None) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
        cookies=cookies,
    )


@pytest.fixture
async def client(app):
    """Anonymous browser: no cookies."""
    async with _client(app) as c:
        yield c


@pytest.fixture
async def authed_client(app):
    """Logged-in browser carrying the access token cookie."""
    async with _client(app, cookies={"token": TOKEN}) as c:
        yield c


@pytest.fixture
async def refresh_client(app):
    """Browser whose access token expired but still holds the refresh token."""
    async with _client(app, cookies={"refresh_token": REFRESH}) as c:
        yield c
