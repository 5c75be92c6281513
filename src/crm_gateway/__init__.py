"""crm-gateway - authenticated request gateway and realtime session client"""

from .core.config import GatewayConfig
from .domain.models import AuthState, ConnectionState, CredentialPair, RefreshOutcome
from .infrastructure import (
    CRMApiClient,
    FileTokenStore,
    LoggingNavigator,
    MemoryTokenStore,
    RealtimeConnectionManager,
    SessionContext,
)
from .shared.exceptions import (
    GatewayError,
    RealtimeConnectionError,
    RequestFailedError,
    SessionExpiredError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "AuthState",
    "CRMApiClient",
    "ConnectionState",
    "CredentialPair",
    "FileTokenStore",
    "GatewayConfig",
    "GatewayError",
    "LoggingNavigator",
    "MemoryTokenStore",
    "RealtimeConnectionError",
    "RealtimeConnectionManager",
    "RefreshOutcome",
    "RequestFailedError",
    "SessionContext",
    "SessionExpiredError",
    "TransportError",
]
