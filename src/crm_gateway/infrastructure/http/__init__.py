"""Request gateway

GatewayAuthManager - Credential renewal against the refresh endpoint
GatewayRequestClient - HTTP requests with refresh-and-retry
CRMApiClient - Facade exposing the CRM API operations
"""

from .auth import GatewayAuthManager
from .facade import CRMApiClient, store_from_config
from .requests import GatewayRequestClient

__all__ = [
    "CRMApiClient",
    "GatewayAuthManager",
    "GatewayRequestClient",
    "store_from_config",
]
