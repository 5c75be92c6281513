"""Configuration management for the CRM gateway"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_SOCKET_URL = "http://localhost:3001"
DEFAULT_LOGIN_PATH = "/login"
DEFAULT_REQUEST_TIMEOUT = 30.0


def _first_env(*names: str) -> str | None:
    """Return the first non-empty environment variable among ``names``"""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


@dataclass(frozen=True)
class GatewayConfig:
    """Configuration for the request gateway and realtime connection

    Resolved once at startup and immutable thereafter.
    """

    api_url: str = DEFAULT_API_URL
    socket_url: str = DEFAULT_SOCKET_URL
    login_path: str = DEFAULT_LOGIN_PATH

    # Durable token mirror - None keeps tokens in memory only
    token_store_path: Path | None = None

    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "GatewayConfig":
        """Load configuration from environment variables

        Args:
            load_env_file: Load a ``.env`` file from the working directory first

        Returns:
            GatewayConfig instance with values from environment

        Raises:
            ValueError: If CRM_REQUEST_TIMEOUT is not a positive number
        """
        if load_env_file:
            load_dotenv()

        api_url = (
            _first_env("CRM_API_URL", "NEXT_PUBLIC_API_URL") or DEFAULT_API_URL
        )
        socket_url = (
            _first_env("CRM_SOCKET_URL", "NEXT_PUBLIC_SOCKET_URL")
            or DEFAULT_SOCKET_URL
        )
        login_path = os.getenv("CRM_LOGIN_PATH") or DEFAULT_LOGIN_PATH

        store_env = os.getenv("CRM_TOKEN_STORE")
        token_store_path = Path(store_env).expanduser() if store_env else None

        timeout_env = os.getenv("CRM_REQUEST_TIMEOUT")
        if timeout_env:
            try:
                request_timeout = float(timeout_env)
            except ValueError as e:
                raise ValueError(
                    f"CRM_REQUEST_TIMEOUT must be a number, got {timeout_env!r}"
                ) from e
            if request_timeout <= 0:
                raise ValueError(
                    f"CRM_REQUEST_TIMEOUT must be positive, got {request_timeout}"
                )
        else:
            request_timeout = DEFAULT_REQUEST_TIMEOUT

        config = cls(
            api_url=api_url.rstrip("/"),
            socket_url=socket_url.rstrip("/"),
            login_path=login_path,
            token_store_path=token_store_path,
            request_timeout=request_timeout,
        )

        logger.info("Configuration loaded:")
        logger.info(f"  API URL: {config.api_url}")
        logger.info(f"  Socket URL: {config.socket_url}")
        logger.info(f"  Login Path: {config.login_path}")
        logger.info(
            f"  Token Store: {config.token_store_path or 'memory only'}"
        )
        logger.info(f"  Request Timeout: {config.request_timeout}s")

        return config
