# ============================================
# FILE: txsaga/__init__.py
# ============================================

"""
txsaga - in-process sequential transactions with compensations

Runs an ordered list of steps. Each step is a unit of work plus the
compensations that undo it. The first failing step stops the transaction and
the compensations collected so far run most-recent-first.

Usage Mode 1 - Functional:
    >>> from txsaga import Step, commit
    >>>
    >>> commit(
    ...     Step(create_order, compensations=[cancel_order]),
    ...     Step(charge_card, compensations=[refund_card]),
    ... )

Usage Mode 2 - Builder:
    >>> from txsaga import Transaction
    >>>
    >>> tx = Transaction(name="checkout")
    >>> tx.add_step(create_order, cancel_order)
    >>> tx.add_step(charge_card, refund_card)
    >>> result = tx.run()
    >>> result.is_rolled_back
    False

A work callable returns None on success and a failure indicator (usually an
exception instance) otherwise. A failed transaction surfaces as
TransactionFailedError, rendered as:

    transaction failed
    task returned an error: <failure>
"""

from txsaga.core import (
    MalformedStepError,
    NullLogger,
    Step,
    Task,
    Transaction,
    TransactionConfig,
    TransactionError,
    TransactionFailedError,
    commit,
    configure,
    configure_default_logging,
    get_config,
    get_logger,
    locate_failure,
    run,
    set_logger,
    validate,
)
from txsaga.types import FailureIndicator, TransactionResult, TransactionStatus

__all__ = [
    # Primary exports
    "commit",
    "run",
    "validate",
    "Transaction",
    "Step",
    "Task",
    "locate_failure",
    # Configuration
    "TransactionConfig",
    "configure",
    "get_config",
    # Logging
    "NullLogger",
    "configure_default_logging",
    "get_logger",
    "set_logger",
    # Types and results
    "FailureIndicator",
    "TransactionResult",
    "TransactionStatus",
    # Exceptions
    "TransactionError",
    "MalformedStepError",
    "TransactionFailedError",
]
