"""Core configuration"""

from .config import GatewayConfig

__all__ = ["GatewayConfig"]
