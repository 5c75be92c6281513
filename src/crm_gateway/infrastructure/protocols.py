"""Protocols for the gateway's pluggable collaborators.

These protocols let the host environment swap storage, navigation and the
realtime transport without touching the gateway itself.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TokenStore(Protocol):
    """Durable string slots keyed by name (``accessToken``/``refreshToken``)."""

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value under ``key``."""
        ...

    def remove(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...


@runtime_checkable
class Navigator(Protocol):
    """Receives the unauthenticated redirect on session expiry."""

    def redirect(self, path: str) -> None:
        """Navigate the host application to ``path``."""
        ...


@runtime_checkable
class RealtimeClient(Protocol):
    """Subset of ``socketio.AsyncClient`` the connection manager relies on."""

    connected: bool

    def on(
        self, event: str, handler: Any = None, namespace: str | None = None
    ) -> Any:
        """Register an event handler."""
        ...

    async def connect(self, url: str, **kwargs: Any) -> None:
        """Perform the handshake."""
        ...

    async def disconnect(self) -> None:
        """Close the connection."""
        ...
