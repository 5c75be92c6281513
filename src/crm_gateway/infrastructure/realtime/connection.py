"""RealtimeConnectionManager - singleton Socket.IO connection lifecycle"""

import asyncio
from collections.abc import Callable

import socketio
from loguru import logger
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from crm_gateway.domain.models import ConnectionState
from crm_gateway.shared.exceptions import RealtimeConnectionError

from ..logging_bridge import install_logging_bridge
from ..protocols import RealtimeClient

TRANSPORTS = ["websocket"]


class RealtimeConnectionManager:
    """Owns at most one live realtime connection

    Responsibilities:
    - Idempotent connect/disconnect
    - Token-authenticated handshake over the websocket transport only
    - Recording connect/disconnect transitions for diagnostics

    ``connect`` and ``disconnect`` are serialized by a lock, so two callers
    racing to connect end up sharing one handshake.
    """

    def __init__(
        self,
        url: str,
        client_factory: Callable[[], RealtimeClient] | None = None,
    ) -> None:
        """Initialize connection manager

        Args:
            url: Realtime endpoint URL
            client_factory: Builds a new client per connection; defaults to
                ``socketio.AsyncClient`` with the library's own reconnection
                settings
        """
        self._url = url
        self._client_factory = client_factory or socketio.AsyncClient
        self._client: RealtimeClient | None = None
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()

        install_logging_bridge()

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return (
            self._state is ConnectionState.CONNECTED
            and self._client is not None
            and self._client.connected
        )

    def get_socket(self) -> RealtimeClient | None:
        """Current connection, or None"""
        return self._client

    async def connect(self, token: str) -> RealtimeClient:
        """Return the live connection, establishing one if needed

        Args:
            token: Access token presented at handshake time

        Returns:
            The connected client

        Raises:
            RealtimeConnectionError: If the handshake fails
        """
        async with self._lock:
            if self._client is not None and self._client.connected:
                return self._client

            if self._client is not None:
                await self._discard_stale_client()

            logger.info(f"Connecting to realtime endpoint {self._url}...")
            self._state = ConnectionState.CONNECTING
            client = self._client_factory()
            self._register_observers(client)
            self._client = client

            try:
                await client.connect(
                    self._url,
                    auth={"token": token},
                    transports=TRANSPORTS,
                )
            except SocketIOConnectionError as e:
                self._reset_pending(client)
                raise RealtimeConnectionError(
                    f"Realtime connection failed: {e}"
                ) from e
            except BaseException:
                # Cancellation or an unexpected failure mid-handshake
                self._reset_pending(client)
                raise

            self._state = ConnectionState.CONNECTED
            return client

    async def disconnect(self) -> None:
        """Terminate the connection if one exists"""
        async with self._lock:
            if self._client is None:
                return

            client = self._client
            self._client = None
            self._state = ConnectionState.DISCONNECTED
            logger.info("Disconnecting realtime connection...")
            await client.disconnect()

    def _reset_pending(self, client: RealtimeClient) -> None:
        """Forget a client whose handshake never completed"""
        if client is self._client:
            self._client = None
            self._state = ConnectionState.DISCONNECTED
        logger.warning("Realtime handshake did not complete")

    async def _discard_stale_client(self) -> None:
        """Stop a dropped client so its own reconnect loop cannot race ours"""
        stale = self._client
        self._client = None
        self._state = ConnectionState.DISCONNECTED
        try:
            await stale.disconnect()
        except Exception as e:
            logger.warning(f"Failed to close stale realtime client: {e}")

    def _register_observers(self, client: RealtimeClient) -> None:
        """Log connect/disconnect transitions of ``client``"""

        async def on_connect() -> None:
            logger.info("[Socket] Connected")
            if client is self._client:
                self._state = ConnectionState.CONNECTED

        async def on_disconnect(*args: object) -> None:
            logger.info("[Socket] Disconnected")
            if client is self._client:
                self._state = ConnectionState.DISCONNECTED

        client.on("connect", on_connect)
        client.on("disconnect", on_disconnect)
