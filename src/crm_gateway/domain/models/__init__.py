"""Domain models"""

from .connection import ConnectionState
from .credentials import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, CredentialPair
from .session import AuthState, RefreshOutcome

__all__ = [
    "ACCESS_TOKEN_KEY",
    "REFRESH_TOKEN_KEY",
    "AuthState",
    "ConnectionState",
    "CredentialPair",
    "RefreshOutcome",
]
