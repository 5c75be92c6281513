"""Bridge stdlib logging from third-party clients into loguru"""

import logging

from loguru import logger

BRIDGED_LOGGERS = ("httpx", "socketio", "engineio")

_installed = False


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


def install_logging_bridge() -> None:
    """Bridge stdlib logging used by httpx/socketio into loguru once."""
    global _installed
    if _installed:
        return

    handler = _LoguruHandler()
    for name in BRIDGED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.setLevel(logging.DEBUG)
        std_logger.addHandler(handler)
        std_logger.propagate = False

    _installed = True
