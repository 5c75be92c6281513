"""Infrastructure module

SessionContext - Credential pair owner with explicit lifecycle
CRMApiClient - Request gateway facade
RealtimeConnectionManager - Singleton realtime connection
"""

from .http import CRMApiClient, GatewayAuthManager, GatewayRequestClient
from .logging_bridge import install_logging_bridge
from .navigation import LoggingNavigator
from .protocols import Navigator, RealtimeClient, TokenStore
from .realtime import RealtimeConnectionManager
from .session import SessionContext
from .storage import FileTokenStore, MemoryTokenStore

__all__ = [
    "CRMApiClient",
    "FileTokenStore",
    "GatewayAuthManager",
    "GatewayRequestClient",
    "LoggingNavigator",
    "MemoryTokenStore",
    "Navigator",
    "RealtimeClient",
    "RealtimeConnectionManager",
    "SessionContext",
    "TokenStore",
    "install_logging_bridge",
]
