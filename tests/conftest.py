import json
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app

Handler = Callable[[httpx.Request], httpx.Response]


class UpstreamRecorder:
    """Programmable stand-in for thirdweb and SideShift."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        thirdweb_secret_key="tw-secret",
        sideshift_secret="ss-secret",
        sideshift_affiliate_id="aff-1",
    )


@pytest.fixture
def make_client(upstream: UpstreamRecorder):
    clients = []

    def _make(settings: Settings) -> TestClient:
        client = TestClient(create_app(settings, transport=httpx.MockTransport(upstream)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings: Settings) -> TestClient:
    return make_client(settings)
