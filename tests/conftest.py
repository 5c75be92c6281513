"""Pytest fixtures for crm-gateway tests"""

import json

import httpx
import pytest

from crm_gateway.core.config import GatewayConfig
from crm_gateway.infrastructure.http import CRMApiClient
from crm_gateway.infrastructure.navigation import LoggingNavigator
from crm_gateway.infrastructure.session import SessionContext
from crm_gateway.infrastructure.storage import MemoryTokenStore

API_URL = "http://api.test"


class FakeCRMServer:
    """Scripted stand-in for the CRM backend, served through httpx.MockTransport

    Each route holds a queue of responses; the last one repeats once the
    queue is drained. Unknown routes answer 404.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], list[dict]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, **kwargs) -> None:
        self._routes.setdefault((method, path), []).append(
            {"status_code": status, **kwargs}
        )

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "Not found"})
        scripted = queue.pop(0) if len(queue) > 1 else queue[0]
        if "raise_error" in scripted:
            raise scripted["raise_error"]
        return httpx.Response(**scripted)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content)


def _tokens_payload(access: str, refresh: str, **extra) -> dict:
    """Login/refresh response body"""
    return {"tokens": {"accessToken": access, "refreshToken": refresh}, **extra}


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(api_url=API_URL, socket_url="http://socket.test")


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def session(token_store) -> SessionContext:
    return SessionContext.create(token_store)


@pytest.fixture
def navigator() -> LoggingNavigator:
    return LoggingNavigator()


@pytest.fixture
def fake_server() -> FakeCRMServer:
    return FakeCRMServer()


@pytest.fixture
def api_client(config, session, navigator, fake_server) -> CRMApiClient:
    """Real CRMApiClient wired to the fake backend"""
    return CRMApiClient(
        config,
        session=session,
        navigator=navigator,
        transport=httpx.MockTransport(fake_server.handle),
    )


@pytest.fixture
def tokens_payload():
    """Builder for login/refresh response bodies"""
    return _tokens_payload
