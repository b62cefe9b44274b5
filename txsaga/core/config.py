"""
TransactionConfig - process-wide settings for the transaction runner.

The runner itself takes no options: every call is driven only by the steps it
receives. Configuration covers the ambient concerns around it, currently
logging.

Example:
    >>> from txsaga import TransactionConfig, configure
    >>>
    >>> configure(TransactionConfig(log_level="DEBUG"))
    >>>
    >>> # Or from the environment (TXSAGA_LOGGING, TXSAGA_LOG_LEVEL)
    >>> configure(TransactionConfig.from_env())
    >>>
    >>> # Or from a YAML file
    >>> configure(TransactionConfig.from_file("txsaga.yaml"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from txsaga.core.logger import ROOT_LOGGER_NAME

logger = logging.getLogger(__name__)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass
class TransactionConfig:
    """
    Settings shared by every transaction run in the process.

    Attributes:
        logging: Emit runner log records (False routes them to a NullLogger)
        log_level: Level applied to the 'txsaga' logger by configure()
    """

    logging: bool = True
    log_level: str | None = None

    def __post_init__(self) -> None:
        if self.log_level is not None:
            level = str(self.log_level).strip().upper()
            if level not in _LEVELS:
                msg = f"Unknown log level: {self.log_level!r}"
                raise ValueError(msg)
            self.log_level = level

    def with_logging(self, enabled: bool, log_level: str | None = None) -> TransactionConfig:
        """Create a new config with different logging settings (immutable update)."""
        return replace(self, logging=enabled, log_level=log_level or self.log_level)

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> TransactionConfig:
        """
        Create configuration from environment variables.

        Environment variables:
            TXSAGA_LOGGING: Enable runner logging (true/false)
            TXSAGA_LOG_LEVEL: Level for the 'txsaga' logger (DEBUG, INFO, ...)

        Args:
            load_dotenv: If True, loads a .env file before reading variables
        """
        from txsaga.core.env import get_env

        env = get_env()
        if load_dotenv:
            env.load()

        return cls(
            logging=env.get_bool("TXSAGA_LOGGING", True),
            log_level=env.get("TXSAGA_LOG_LEVEL") or None,
        )

    @classmethod
    def from_file(cls, file_path: str | Path, substitute_env: bool = True) -> TransactionConfig:
        """
        Load configuration from a YAML file.

        Supports environment variable substitution using ${VAR} syntax.

        Example:
            # In txsaga.yaml:
            # logging:
            #   enabled: true
            #   level: ${TXSAGA_LOG_LEVEL:-INFO}
        """
        import yaml

        from txsaga.core.env import get_env

        path = Path(file_path)
        if not path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = yaml.safe_load(f)

        if not data:
            return cls()

        if substitute_env:
            env = get_env()
            env.load()
            data = env.substitute_dict(data)

        logging_data = data.get("logging") or {}
        enabled = logging_data.get("enabled", True)
        if isinstance(enabled, str):
            enabled = enabled.strip().lower() in ("true", "1", "yes", "on")

        return cls(logging=bool(enabled), log_level=logging_data.get("level"))


# Global configuration singleton
_global_config: TransactionConfig | None = None


def get_config() -> TransactionConfig:
    """Get the global transaction configuration."""
    global _global_config
    if _global_config is None:
        _global_config = TransactionConfig()
    return _global_config


def configure(config: TransactionConfig) -> None:
    """Set the global transaction configuration."""
    global _global_config
    _global_config = config

    if config.log_level is not None:
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(config.log_level)

    logger.info(f"txsaga configured: logging={config.logging}, level={config.log_level}")


def reset_config() -> None:
    """Drop the global configuration so the next get_config() builds a default."""
    global _global_config
    _global_config = None
