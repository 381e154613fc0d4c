"""Shared fixtures: a scripted fake phpIPAM server on httpx.MockTransport."""

import json
from collections.abc import Callable

import httpx
import pytest

from phpipam_client import config
from phpipam_client.config import Config
from phpipam_client.session import Session, Token

APP_ID = "0123456789abcdefgh"

AUTH_OK = {
    "code": 200,
    "success": True,
    "data": {"token": "foobarbazboop", "expires": "2999-12-31 23:59:59"},
}

VALID_TOKEN = Token(value="foobarbazboop", expires="2999-12-31 23:59:59")
EXPIRED_TOKEN = Token(value="foobarbazboop", expires="1999-12-31 23:59:59")


class FakeServer:
    """Records requests and answers them with queued or routed responses.

    Responses are looked up by ``(method, path)`` first, then taken from
    the FIFO queue. Paths are relative to ``/api/<app id>``.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, str]] = {}
        self.queue: list[tuple[int, str]] = []
        self.error: Callable[[httpx.Request], None] | None = None

    def route(self, method: str, path: str, payload: dict | str, status: int = 200):
        body = payload if isinstance(payload, str) else json.dumps(payload)
        self.routes[(method, path)] = (status, body)

    def enqueue(self, payload: dict | str, status: int = 200):
        body = payload if isinstance(payload, str) else json.dumps(payload)
        self.queue.append((status, body))

    def relative_path(self, request: httpx.Request) -> str:
        prefix = f"/api/{APP_ID}"
        path = request.url.path
        return path[len(prefix) :] if path.startswith(prefix) else path

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and self.relative_path(r) == path
        ]

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            self.error(request)
        key = (request.method, self.relative_path(request))
        if key in self.routes:
            status, body = self.routes[key]
        elif self.queue:
            status, body = self.queue.pop(0)
        else:
            status, body = 500, "no response configured"
        return httpx.Response(
            status,
            content=body.encode(),
            headers={"Content-Type": "application/json"},
        )


def phpipam_config() -> Config:
    return Config(
        app_id=APP_ID,
        endpoint="http://phpipam.test/api",
        username="nobody",
        password="changeit",
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep PHPIPAM_* variables of the host out of the tests."""
    for var in config.ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def make_session(server: FakeServer) -> Callable[..., Session]:
    """Factory for sessions wired to the fake server."""
    clients: list[httpx.Client] = []

    def factory(token: Token | None = None) -> Session:
        http_client = httpx.Client(transport=httpx.MockTransport(server.handler))
        clients.append(http_client)
        session = Session(phpipam_config(), token=token)
        session.set_http_client(http_client)
        return session

    yield factory

    for http_client in clients:
        http_client.close()


@pytest.fixture
def session(make_session) -> Session:
    """Session with a token valid far into the future."""
    return make_session(token=VALID_TOKEN)
