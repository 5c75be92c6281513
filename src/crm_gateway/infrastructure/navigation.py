"""Unauthenticated redirect handling"""

from loguru import logger


class LoggingNavigator:
    """Default navigator for hosts without a view to navigate

    Logs the redirect and remembers the last target so callers can act on it.
    """

    def __init__(self) -> None:
        self.current_path: str | None = None

    def redirect(self, path: str) -> None:
        logger.warning(f"Session expired - redirecting to {path}")
        self.current_path = path
