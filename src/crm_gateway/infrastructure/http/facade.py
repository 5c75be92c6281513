"""CRMApiClient - facade over session, auth and request clients"""

from typing import Any
from urllib.parse import urlencode

import httpx
from loguru import logger

from crm_gateway.core.config import GatewayConfig
from crm_gateway.domain.models import CredentialPair

from ..protocols import Navigator, TokenStore
from ..session import SessionContext
from ..storage import FileTokenStore, MemoryTokenStore
from .auth import GatewayAuthManager
from .requests import GatewayRequestClient


class CRMApiClient:
    """WhatsApp CRM REST API client (facade pattern)

    Delegates credential state to SessionContext, renewal to
    GatewayAuthManager and HTTP to GatewayRequestClient. Domain methods are
    thin parameter bindings over ``request``.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        session: SessionContext | None = None,
        navigator: Navigator | None = None,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize API client

        Args:
            config: Gateway configuration (defaults to GatewayConfig())
            session: Session to authenticate with; created from the
                configured token store when omitted
            navigator: Receives the redirect on session expiry
            http_client: Externally managed httpx client
            transport: Transport for the internally built httpx client
        """
        self._config = config or GatewayConfig()
        self._session = session or SessionContext.create(
            store_from_config(self._config)
        )
        self._auth_manager = GatewayAuthManager(
            self._session, self._config.api_url
        )
        self._request_client = GatewayRequestClient(
            self._session,
            self._auth_manager,
            self._config.api_url,
            navigator=navigator,
            login_path=self._config.login_path,
            timeout=self._config.request_timeout,
            http_client=http_client,
            transport=transport,
        )

    async def __aenter__(self) -> "CRMApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying HTTP client"""
        await self._request_client.aclose()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def navigator(self) -> Navigator:
        return self._request_client.navigator

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def set_token(self, token: str) -> None:
        """Replace the access token and persist it"""
        self._session.set_token(token)

    def clear_token(self) -> None:
        """Remove access and refresh tokens from memory and storage"""
        self._session.clear()

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._request_client.request(
            method, endpoint, data=data, params=params, headers=headers
        )

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def register(self, data: dict) -> Any:
        return await self.request("POST", "/api/auth/register", data=data)

    async def login(self, data: dict) -> Any:
        """Log in and store the issued credential pair

        Raises:
            ValueError: If the response carries no credential pair
        """
        result = await self.request("POST", "/api/auth/login", data=data)
        self._session.set_credentials(CredentialPair.from_response(result))
        logger.info("Logged in")
        return result

    async def logout(self) -> Any:
        """Log out remotely, then clear local credentials

        Transport failures propagate with credentials left in place.
        """
        result = await self.request("POST", "/api/auth/logout")
        self.clear_token()
        logger.info("Logged out")
        return result

    async def get_current_user(self) -> Any:
        return await self.request("GET", "/api/auth/me")

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    async def get_contacts(self, params: dict | None = None) -> Any:
        query = urlencode(params or {})
        return await self.request(
            "GET", f"/api/contacts?{query}" if query else "/api/contacts"
        )

    async def get_contact(self, contact_id: str) -> Any:
        return await self.request("GET", f"/api/contacts/{contact_id}")

    async def update_contact(self, contact_id: str, data: dict) -> Any:
        return await self.request(
            "PATCH", f"/api/contacts/{contact_id}", data=data
        )

    # ------------------------------------------------------------------
    # WhatsApp
    # ------------------------------------------------------------------

    async def get_sessions(self) -> Any:
        return await self.request("GET", "/api/whatsapp/sessions")

    async def create_session(self, data: dict) -> Any:
        return await self.request("POST", "/api/whatsapp/sessions", data=data)

    async def connect_session(self, session_id: str) -> Any:
        return await self.request(
            "POST", f"/api/whatsapp/sessions/{session_id}/connect"
        )

    async def send_message(self, data: dict) -> Any:
        return await self.request("POST", "/api/whatsapp/send", data=data)

    # ------------------------------------------------------------------
    # Generic
    # ------------------------------------------------------------------

    async def health(self) -> Any:
        """Backend health report (status, uptime, database)"""
        return await self.request("GET", "/api/health")

    async def get(self, endpoint: str, params: dict | None = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: Any = None) -> Any:
        return await self.request("POST", endpoint, data=data)


def store_from_config(config: GatewayConfig) -> TokenStore:
    """File-backed store when a path is configured, memory otherwise"""
    if config.token_store_path is not None:
        return FileTokenStore(config.token_store_path)
    return MemoryTokenStore()
