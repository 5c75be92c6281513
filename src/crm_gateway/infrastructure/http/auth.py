"""GatewayAuthManager - access token renewal"""

import httpx
from loguru import logger

from crm_gateway.domain.models import CredentialPair, RefreshOutcome

from ..session import SessionContext

REFRESH_ENDPOINT = "/api/auth/refresh"


class GatewayAuthManager:
    """Renews the session's credential pair against the refresh endpoint

    Responsibilities:
    - Refresh token lookup
    - Refresh call and response validation
    - Persisting the renewed pair into the session

    ``refresh_tokens`` never raises; every failure is reported through the
    returned RefreshOutcome.
    """

    def __init__(self, session: SessionContext, base_url: str) -> None:
        """Initialize auth manager

        Args:
            session: Session whose credentials are renewed
            base_url: REST API base URL
        """
        self._session = session
        self._base_url = base_url.rstrip("/")

    @property
    def session(self) -> SessionContext:
        return self._session

    async def refresh_tokens(self, http_client: httpx.AsyncClient) -> RefreshOutcome:
        """Exchange the stored refresh token for a new credential pair

        Steps:
        1. Read refresh token (no network call when absent)
        2. POST /api/auth/refresh with {"refreshToken": ...}
        3. On 2xx, store the returned pair in the session

        Args:
            http_client: Client used for the refresh call

        Returns:
            RefreshOutcome describing the attempt
        """
        refresh_token = self._session.refresh_token
        if not refresh_token:
            logger.info("No refresh token stored - cannot renew session")
            return RefreshOutcome.NO_REFRESH_TOKEN

        logger.info("Access token rejected - refreshing credentials...")
        self._session.begin_refresh()
        try:
            response = await http_client.post(
                f"{self._base_url}{REFRESH_ENDPOINT}",
                json={"refreshToken": refresh_token},
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to refresh token (network error): {e}")
            return RefreshOutcome.TRANSPORT_ERROR
        finally:
            self._session.end_refresh()

        if not response.is_success:
            logger.warning(
                f"Refresh rejected by server: status={response.status_code}"
            )
            return RefreshOutcome.REJECTED

        try:
            credentials = CredentialPair.from_response(response.json())
        except ValueError as e:
            logger.error(f"Failed to refresh token (malformed response): {e}")
            return RefreshOutcome.REJECTED

        self._session.set_credentials(credentials)
        logger.info("Credentials refreshed successfully")
        return RefreshOutcome.REFRESHED
