"""SessionContext - explicit owner of the credential pair"""

from loguru import logger

from crm_gateway.domain.models import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    AuthState,
    CredentialPair,
)

from .protocols import TokenStore


class SessionContext:
    """Holds the credential pair for one logical user session

    Responsibilities:
    - In-memory access/refresh token cache
    - Mirroring tokens to the durable TokenStore
    - Auth state tracking (UNAUTHENTICATED/AUTHENTICATED/REFRESHING)

    Several contexts can live side by side; nothing here is process-global.
    """

    def __init__(self, store: TokenStore | None = None) -> None:
        """Initialize an empty session

        Args:
            store: Durable token mirror, or None when the host has no storage
        """
        self._store = store
        self._access_token: str | None = None
        self._refresh_token: str | None = None
        self._state = AuthState.UNAUTHENTICATED

    @classmethod
    def create(cls, store: TokenStore | None = None) -> "SessionContext":
        """Create a session, hydrating tokens from ``store`` when present"""
        session = cls(store)
        if store is None:
            logger.debug("No token store available - skipping token hydration")
            return session

        session._access_token = store.get(ACCESS_TOKEN_KEY)
        session._refresh_token = store.get(REFRESH_TOKEN_KEY)
        if session._access_token:
            session._state = AuthState.AUTHENTICATED
            logger.debug("Hydrated access token from token store")
        return session

    def destroy(self) -> None:
        """End the session's lifecycle, dropping in-memory state only

        The durable mirror is left untouched so a later ``create`` can resume.
        """
        self._access_token = None
        self._refresh_token = None
        self._state = AuthState.UNAUTHENTICATED

    @property
    def store(self) -> TokenStore | None:
        return self._store

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def refresh_token(self) -> str | None:
        """Refresh token, read from the durable store when one exists"""
        if self._store is not None:
            return self._store.get(REFRESH_TOKEN_KEY)
        return self._refresh_token

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def set_token(self, token: str) -> None:
        """Replace the access token and persist it"""
        self._access_token = token
        if self._store is not None:
            self._store.set(ACCESS_TOKEN_KEY, token)
        self._state = AuthState.AUTHENTICATED

    def set_credentials(self, credentials: CredentialPair) -> None:
        """Replace both tokens and persist them"""
        self.set_token(credentials.access_token)
        self._refresh_token = credentials.refresh_token
        if self._store is not None:
            self._store.set(REFRESH_TOKEN_KEY, credentials.refresh_token)

    def clear(self) -> None:
        """Remove in-memory and persisted tokens"""
        self._access_token = None
        self._refresh_token = None
        if self._store is not None:
            self._store.remove(ACCESS_TOKEN_KEY)
            self._store.remove(REFRESH_TOKEN_KEY)
        self._state = AuthState.UNAUTHENTICATED

    def begin_refresh(self) -> None:
        self._state = AuthState.REFRESHING

    def end_refresh(self) -> None:
        """Leave REFRESHING, falling back to whatever the token says"""
        if self._state is AuthState.REFRESHING:
            self._state = (
                AuthState.AUTHENTICATED
                if self._access_token
                else AuthState.UNAUTHENTICATED
            )
