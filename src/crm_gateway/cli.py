"""Command line entry point for the CRM gateway"""

import asyncio
import dataclasses
import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger
from rich.console import Console

from crm_gateway.core.config import GatewayConfig
from crm_gateway.infrastructure.http import CRMApiClient
from crm_gateway.shared.exceptions import GatewayError

DEFAULT_CLI_TOKEN_STORE = Path("~/.crm-gateway/tokens.json")

# Returned by handlers whose arguments were incomplete
USAGE_ERROR = object()


class CommandDispatcher:
    """Dispatches CLI commands to API client calls"""

    def __init__(self, client: CRMApiClient, console: Console) -> None:
        self.client = client
        self.console = console
        self._handlers = {
            "login": self._handle_login,
            "logout": self._handle_logout,
            "me": self._handle_me,
            "contacts": self._handle_contacts,
            "sessions": self._handle_sessions,
            "health": self._handle_health,
        }

    async def dispatch(self, argv: list[str]) -> int:
        """Parse and execute command

        Args:
            argv: Command line arguments (sys.argv)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        if len(argv) < 2:
            self._print_usage("No command specified")
            return 1

        method = argv[1]
        handler = self._handlers.get(method)

        if handler is None:
            self._print_usage(f"Unknown command: {method}")
            return 1

        try:
            result = await handler(argv)
        except (GatewayError, ValueError) as e:
            logger.error(f"{method} failed: {e}")
            return 1

        if result is USAGE_ERROR:
            return 1
        self.console.print_json(data=result)
        return 0

    def _print_usage(self, reason: str) -> None:
        """Print available commands"""
        logger.error(f"{reason}. Available: " + ", ".join(self._handlers))

    async def _handle_login(self, argv: list[str]) -> Any:
        if len(argv) < 4:
            logger.error("Usage: crm-gateway login <email> <password>")
            return USAGE_ERROR
        return await self.client.login({"email": argv[2], "password": argv[3]})

    async def _handle_logout(self, argv: list[str]) -> Any:
        return await self.client.logout()

    async def _handle_me(self, argv: list[str]) -> Any:
        return await self.client.get_current_user()

    async def _handle_contacts(self, argv: list[str]) -> Any:
        # Remaining args are key=value query filters
        params = dict(arg.split("=", 1) for arg in argv[2:] if "=" in arg)
        return await self.client.get_contacts(params)

    async def _handle_sessions(self, argv: list[str]) -> Any:
        return await self.client.get_sessions()

    async def _handle_health(self, argv: list[str]) -> Any:
        return await self.client.health()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    argv = sys.argv if argv is None else argv
    logger.remove()
    logger.add(sys.stderr, level=os.getenv("CRM_LOG_LEVEL", "WARNING"))

    try:
        config = GatewayConfig.from_env()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if config.token_store_path is None:
        config = dataclasses.replace(
            config, token_store_path=DEFAULT_CLI_TOKEN_STORE.expanduser()
        )

    async def run() -> int:
        async with CRMApiClient(config) as client:
            dispatcher = CommandDispatcher(client, Console())
            return await dispatcher.dispatch(argv)

    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
