"""Tests for RealtimeConnectionManager with a fake Socket.IO client"""

import asyncio

import pytest
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from crm_gateway.domain.models import ConnectionState
from crm_gateway.infrastructure.protocols import RealtimeClient
from crm_gateway.infrastructure.realtime import RealtimeConnectionManager
from crm_gateway.shared.exceptions import RealtimeConnectionError

SOCKET_URL = "http://socket.test"


class FakeSocketClient:
    """Mimics the parts of socketio.AsyncClient the manager uses"""

    def __init__(
        self, fail: bool = False, hang: bool = False, error: Exception | None = None
    ) -> None:
        self.connected = False
        self.handlers: dict = {}
        self.connect_calls: list[tuple[str, dict]] = []
        self.disconnect_calls = 0
        self._fail = fail
        self._hang = hang
        self._error = error

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    async def connect(self, url, **kwargs):
        self.connect_calls.append((url, kwargs))
        await asyncio.sleep(10 if self._hang else 0)
        if self._error is not None:
            raise self._error
        if self._fail:
            raise SocketIOConnectionError("Connection refused by the server")
        self.connected = True
        await self.handlers["connect"]()

    async def disconnect(self):
        self.disconnect_calls += 1
        was_connected = self.connected
        self.connected = False
        if was_connected:
            await self.handlers["disconnect"]()

    async def drop(self):
        """Simulate the transport closing underneath us"""
        self.connected = False
        await self.handlers["disconnect"]("transport close")


@pytest.fixture
def created_clients() -> list[FakeSocketClient]:
    return []


@pytest.fixture
def manager(created_clients) -> RealtimeConnectionManager:
    def factory() -> FakeSocketClient:
        client = FakeSocketClient()
        created_clients.append(client)
        return client

    return RealtimeConnectionManager(SOCKET_URL, client_factory=factory)


@pytest.mark.unit
def test_fake_client_satisfies_protocol():
    assert isinstance(FakeSocketClient(), RealtimeClient)


@pytest.mark.unit
def test_initial_state(manager):
    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.get_socket() is None
    assert manager.is_connected is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_connect_presents_token_over_websocket_only(manager, created_clients):
    client = await manager.connect("A1")

    assert client is created_clients[0]
    url, kwargs = client.connect_calls[0]
    assert url == SOCKET_URL
    assert kwargs["auth"] == {"token": "A1"}
    assert kwargs["transports"] == ["websocket"]
    assert manager.state is ConnectionState.CONNECTED
    assert manager.is_connected


@pytest.mark.unit
@pytest.mark.asyncio
async def test_connect_is_idempotent(manager, created_clients):
    """A second connect while live returns the same client without a handshake"""
    first = await manager.connect("A1")
    second = await manager.connect("A1")

    assert first is second
    assert len(created_clients) == 1
    assert len(first.connect_calls) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_connects_share_one_handshake(manager, created_clients):
    first, second = await asyncio.gather(manager.connect("A1"), manager.connect("A1"))

    assert first is second
    assert len(created_clients) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disconnect_then_connect_builds_fresh_client(manager, created_clients):
    first = await manager.connect("A1")

    await manager.disconnect()

    assert manager.get_socket() is None
    assert manager.state is ConnectionState.DISCONNECTED
    assert first.disconnect_calls == 1

    second = await manager.connect("A2")

    assert second is not first
    assert second.connect_calls[0][1]["auth"] == {"token": "A2"}
    assert manager.is_connected


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disconnect_without_connection_is_noop(manager):
    await manager.disconnect()

    assert manager.get_socket() is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unsolicited_disconnect_is_recorded(manager, created_clients):
    """Transport drops are observed; the reference stays until the next connect"""
    client = await manager.connect("A1")

    await client.drop()

    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.get_socket() is client
    assert manager.is_connected is False

    replacement = await manager.connect("A1")

    assert replacement is not client
    assert client.disconnect_calls == 1
    assert len(created_clients) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_handshake_raises_and_resets():
    failing = FakeSocketClient(fail=True)
    manager = RealtimeConnectionManager(SOCKET_URL, client_factory=lambda: failing)

    with pytest.raises(RealtimeConnectionError) as exc_info:
        await manager.connect("A1")

    assert isinstance(exc_info.value.__cause__, SocketIOConnectionError)
    assert manager.get_socket() is None
    assert manager.state is ConnectionState.DISCONNECTED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancelled_handshake_resets_state():
    """Cancelling a pending connect leaves no half-built client behind"""
    hanging = FakeSocketClient(hang=True)
    manager = RealtimeConnectionManager(SOCKET_URL, client_factory=lambda: hanging)

    task = asyncio.create_task(manager.connect("A1"))
    await asyncio.sleep(0)
    assert manager.state is ConnectionState.CONNECTING

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.get_socket() is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unexpected_handshake_error_propagates_and_resets():
    broken = FakeSocketClient(error=RuntimeError("engine blew up"))
    manager = RealtimeConnectionManager(SOCKET_URL, client_factory=lambda: broken)

    with pytest.raises(RuntimeError, match="engine blew up"):
        await manager.connect("A1")

    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.get_socket() is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_connect_after_cancelled_handshake():
    clients = [FakeSocketClient(hang=True), FakeSocketClient()]
    manager = RealtimeConnectionManager(
        SOCKET_URL, client_factory=lambda: clients.pop(0)
    )

    task = asyncio.create_task(manager.connect("A1"))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    client = await manager.connect("A1")

    assert client.connected
    assert manager.state is ConnectionState.CONNECTED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_observers_log_transitions(manager):
    from loguru import logger

    messages: list[str] = []
    token = logger.add(messages.append, format="{message}")

    try:
        await manager.connect("A1")
        await manager.disconnect()
    finally:
        logger.remove(token)

    assert any("[Socket] Connected" in m for m in messages)
    assert any("[Socket] Disconnected" in m for m in messages)


@pytest.mark.unit
def test_default_factory_is_socketio_async_client():
    import socketio

    manager = RealtimeConnectionManager(SOCKET_URL)

    assert manager._client_factory is socketio.AsyncClient
