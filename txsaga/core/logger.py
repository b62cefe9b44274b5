"""
Logger resolution for txsaga.

Every runner log record goes through get_logger(), which picks, in order:

1. a NullLogger when TransactionConfig.logging is False
2. the logger installed with set_logger() (an application logger, structlog, ...)
3. the standard library logger for the given name, under the 'txsaga' namespace

Usage:
    from txsaga.core.logger import get_logger
    logger = get_logger(__name__)
    logger.warning("Step 1 (charge) failed: declined")

    # Route transaction logs through an application logger
    from txsaga.core.logger import set_logger
    set_logger(logging.getLogger("billing.transactions"))
"""

import logging
from typing import Any

ROOT_LOGGER_NAME = "txsaga"

# Logger installed with set_logger(); None means standard logging
_custom_logger: Any = None


class NullLogger:
    """A logger that does nothing (for when logging is disabled)."""

    def debug(self, *args, **kwargs): pass
    def info(self, *args, **kwargs): pass
    def warning(self, *args, **kwargs): pass
    def error(self, *args, **kwargs): pass
    def exception(self, *args, **kwargs): pass
    def critical(self, *args, **kwargs): pass


_NULL_LOGGER = NullLogger()


def set_logger(logger: Any) -> None:
    """
    Install a logger for every txsaga component.

    Args:
        logger: Object with debug/info/warning/error/exception methods.
                Pass None to go back to standard logging.
    """
    global _custom_logger
    _custom_logger = logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> Any:
    """
    Resolve the logger txsaga code should write to.

    Args:
        name: Logger name (typically __name__ of the calling module)
    """
    # Imported here: config reads ROOT_LOGGER_NAME from this module
    from txsaga.core.config import get_config

    if not get_config().logging:
        return _NULL_LOGGER

    if _custom_logger is not None:
        return _custom_logger

    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def configure_default_logging(
    level: int | str = logging.INFO,
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """
    Send txsaga records to the console.

    Args:
        level: Level for the 'txsaga' namespace, as a number or a name like "DEBUG"
        format_string: Log message format
    """
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=format_string)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
