"""Shared building blocks"""

from .exceptions import (
    GatewayError,
    RealtimeConnectionError,
    RequestFailedError,
    SessionExpiredError,
    TransportError,
)

__all__ = [
    "GatewayError",
    "RealtimeConnectionError",
    "RequestFailedError",
    "SessionExpiredError",
    "TransportError",
]
