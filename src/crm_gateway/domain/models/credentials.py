"""Credential pair domain model"""

from dataclasses import dataclass
from typing import Any

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


@dataclass(frozen=True)
class CredentialPair:
    """Access/refresh token pair issued by login or refresh"""

    access_token: str
    refresh_token: str

    @classmethod
    def from_response(cls, payload: Any) -> "CredentialPair":
        """Extract the pair from a ``{"tokens": {...}}`` response body

        Raises:
            ValueError: If either token is missing or not a string
        """
        tokens = payload.get("tokens") if isinstance(payload, dict) else None
        if not isinstance(tokens, dict):
            raise ValueError("Response does not contain a tokens object")

        access_token = tokens.get(ACCESS_TOKEN_KEY)
        refresh_token = tokens.get(REFRESH_TOKEN_KEY)
        if not isinstance(access_token, str) or not access_token:
            raise ValueError(f"Response is missing {ACCESS_TOKEN_KEY}")
        if not isinstance(refresh_token, str) or not refresh_token:
            raise ValueError(f"Response is missing {REFRESH_TOKEN_KEY}")

        return cls(access_token=access_token, refresh_token=refresh_token)
