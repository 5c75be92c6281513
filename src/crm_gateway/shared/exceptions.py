"""Consolidated exceptions for the CRM gateway.

All custom exceptions are defined here to provide a single source of truth
for error handling across the package.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crm_gateway.domain.models.session import RefreshOutcome


class GatewayError(Exception):
    """Base exception for gateway errors"""

    pass


class SessionExpiredError(GatewayError):
    """Raised when credentials could not be renewed

    Credentials have already been cleared and the unauthenticated redirect
    issued by the time this is raised.
    """

    def __init__(
        self,
        message: str = "Session expired",
        reason: "RefreshOutcome | None" = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason


class RequestFailedError(GatewayError):
    """Raised when the API answers with a non-2xx, non-401 status"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(GatewayError):
    """Raised when a request never got an HTTP response"""

    pass


class RealtimeConnectionError(GatewayError):
    """Raised when the realtime handshake fails"""

    pass
