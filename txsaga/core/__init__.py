"""
Core module for txsaga - contains the fundamental building blocks.
"""

from txsaga.core.config import TransactionConfig, configure, get_config, reset_config
from txsaga.core.exceptions import MalformedStepError, TransactionError, TransactionFailedError
from txsaga.core.logger import NullLogger, configure_default_logging, get_logger, set_logger
from txsaga.core.runner import Transaction, commit, run, validate
from txsaga.core.step import Step, Task, as_step, locate_failure

__all__ = [
    # Config
    "TransactionConfig",
    "configure",
    "get_config",
    "reset_config",
    # Exceptions
    "MalformedStepError",
    "TransactionError",
    "TransactionFailedError",
    # Logger
    "NullLogger",
    "configure_default_logging",
    "get_logger",
    "set_logger",
    # Runner
    "Transaction",
    "commit",
    "run",
    "validate",
    # Steps
    "Step",
    "Task",
    "as_step",
    "locate_failure",
]
