"""GatewayRequestClient - HTTP requests with refresh-and-retry"""

from typing import Any, NoReturn

import httpx
from loguru import logger

from crm_gateway.domain.models import RefreshOutcome
from crm_gateway.shared.exceptions import (
    RequestFailedError,
    SessionExpiredError,
    TransportError,
)

from ..logging_bridge import install_logging_bridge
from ..navigation import LoggingNavigator
from ..protocols import Navigator
from ..session import SessionContext
from .auth import GatewayAuthManager

GENERIC_ERROR_MESSAGE = "Request failed"
UNPARSEABLE_ERROR_MESSAGE = "Unknown error"


class GatewayRequestClient:
    """Low-level HTTP request client with credential renewal

    Responsibilities:
    - HTTP request execution
    - Bearer header injection
    - 401 handling (refresh once, retry once)
    - Error mapping
    """

    USER_AGENT = "crm-gateway/0.1"

    def __init__(
        self,
        session: SessionContext,
        auth_manager: GatewayAuthManager,
        base_url: str,
        navigator: Navigator | None = None,
        login_path: str = "/login",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize request client

        Args:
            session: Session providing the bearer token
            auth_manager: Auth manager used on 401 responses
            base_url: REST API base URL
            navigator: Receives the redirect on session expiry
            login_path: Redirect target on session expiry
            timeout: Request timeout in seconds for the built client
            http_client: Externally managed client (not closed by aclose)
            transport: Transport for the built client (testing)
        """
        self._session = session
        self._auth_manager = auth_manager
        self._base_url = base_url.rstrip("/")
        self._navigator: Navigator = navigator or LoggingNavigator()
        self._login_path = login_path

        install_logging_bridge()
        self._owns_http_client = http_client is None
        self._http_client = http_client or self._build_http_client(
            timeout=timeout, transport=transport
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def navigator(self) -> Navigator:
        return self._navigator

    def _build_http_client(
        self,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        """Create an AsyncClient with httpx request/response logging hooks."""
        return httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": self.USER_AGENT},
            event_hooks={
                "request": [self._log_httpx_request],
                "response": [self._log_httpx_response],
            },
        )

    async def _log_httpx_request(self, request: httpx.Request) -> None:
        """Log outbound httpx requests with headers (auth masked)."""
        headers = {
            k: ("***" if k.lower() == "authorization" else v)
            for k, v in request.headers.items()
        }
        logger.debug(f"HTTPX request: {request.method} {request.url} {headers}")

    async def _log_httpx_response(self, response: httpx.Response) -> None:
        """Log httpx responses; bodies may carry tokens so only status is logged."""
        logger.debug(
            f"HTTPX response: status={response.status_code} url={response.url}"
        )

    def set_http_client(self, client: httpx.AsyncClient) -> None:
        """Set the HTTP client (for testing or external management)"""
        self._http_client = client
        self._owns_http_client = False

    async def aclose(self) -> None:
        """Close the HTTP client if this request client built it"""
        if self._owns_http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    def build_headers(self, headers: dict[str, str] | None = None) -> dict[str, str]:
        """JSON content type, caller headers, then bearer token if held"""
        merged = {"Content-Type": "application/json", **(headers or {})}
        token = self._session.access_token
        if token:
            merged["Authorization"] = f"Bearer {token}"
        return merged

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make authenticated HTTP request, renewing credentials on 401

        Strategy:
        - 2xx: return parsed JSON ({} for an empty body)
        - 401: refresh tokens once, then retry once with the new token
        - 401 again, or refresh failure: clear session, redirect, raise
        - other: raise RequestFailedError with the server's message

        Args:
            method: HTTP method (GET, POST, PATCH, ...)
            endpoint: API endpoint path (e.g., "/api/auth/me")
            data: JSON payload
            params: Query parameters
            headers: Extra request headers

        Returns:
            Parsed response JSON

        Raises:
            SessionExpiredError: If credentials could not be renewed
            RequestFailedError: On any other non-2xx response
            TransportError: If the request got no HTTP response
        """
        url = f"{self._base_url}{endpoint}"
        tokens_refreshed = False

        while True:
            response = await self._send(method, url, data, params, headers)

            if response.status_code == 401 and not tokens_refreshed:
                self._log_auth_failure(response, "Unauthorized - refreshing token")
                outcome = await self._auth_manager.refresh_tokens(self._http_client)
                tokens_refreshed = True
                if not outcome.succeeded:
                    self._expire_session(outcome)
                continue

            if response.status_code == 401:
                self._log_auth_failure(
                    response, "Request rejected after token refresh"
                )
                self._expire_session(None)

            if not response.is_success:
                message = self._error_message(response)
                logger.error(
                    f"{method.upper()} {endpoint} failed: "
                    f"{response.status_code} - {message}"
                )
                raise RequestFailedError(message, status_code=response.status_code)

            return self._parse_body(response)

    async def _send(
        self,
        method: str,
        url: str,
        data: Any,
        params: dict | None,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        logger.debug(f"{method.upper()} {url}")
        try:
            return await self._http_client.request(
                method.upper(),
                url,
                headers=self.build_headers(headers),
                json=data,
                params=params,
            )
        except httpx.RequestError as e:
            logger.warning(f"Network error: {e}")
            raise TransportError(f"{method.upper()} {url} failed: {e}") from e

    def _expire_session(self, reason: RefreshOutcome | None) -> NoReturn:
        """Clear credentials, redirect, then raise SessionExpiredError"""
        self._session.clear()
        self._navigator.redirect(self._login_path)
        raise SessionExpiredError("Session expired", reason=reason)

    def _parse_body(self, response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RequestFailedError(
                "Invalid JSON response", status_code=response.status_code
            ) from e

    def _error_message(self, response: httpx.Response) -> str:
        """Server ``error`` field, or a generic fallback."""
        try:
            body = response.json()
        except ValueError:
            return UNPARSEABLE_ERROR_MESSAGE
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return GENERIC_ERROR_MESSAGE

    def _log_auth_failure(self, response: httpx.Response, prefix: str) -> None:
        """Log auth failures with safe body parsing to avoid KeyError."""
        try:
            body = response.json()
        except ValueError:
            body = response.text
        logger.warning(f"{prefix} ({response.status_code}): {body}")
