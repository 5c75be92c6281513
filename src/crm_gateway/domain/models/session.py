"""Session state domain models"""

from enum import Enum


class AuthState(Enum):
    """Credential lifecycle of a session

    - UNAUTHENTICATED: no access token held
    - AUTHENTICATED: access token held
    - REFRESHING: a refresh call is in flight
    """

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class RefreshOutcome(Enum):
    """Result of a single refresh attempt"""

    REFRESHED = "refreshed"
    NO_REFRESH_TOKEN = "no_refresh_token"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"

    @property
    def succeeded(self) -> bool:
        return self is RefreshOutcome.REFRESHED
