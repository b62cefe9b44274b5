# ============================================
# FILE: txsaga/types.py
# ============================================

"""
All type definitions, enums, and dataclasses
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from txsaga.core.exceptions import TransactionFailedError

FailureIndicator = Union[BaseException, Any, None]
"""None means the call succeeded; any other value describes the failure.

The BaseException member lets the step validator recognise the alias in
any return position, including inside tuple[...] annotations.
"""

Work = Callable[[], Any]
"""Zero-argument step action returning a failure indicator."""

Compensation = Callable[[], Any]
"""Zero-argument rollback action; its result is only logged."""


class TransactionStatus(Enum):
    """Overall transaction status"""

    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class TransactionResult:
    """
    Report of one transaction run.

    Attributes:
        success: True when every step's work succeeded
        status: COMMITTED or ROLLED_BACK
        total_steps: Number of steps submitted
        executed_steps: Number of work callables invoked (failing step included)
        failed_step: Index of the step that stopped execution, if any
        failed_step_name: Name of that step, if it has one
        failure: Failure indicator returned (or raised) by the failing step
        error: Composite error to hand back to callers
        compensations_run: Number of compensations invoked
        compensation_failures: Failures returned or raised by compensations.
            Informational only; they never change the outcome.
        execution_time: Wall-clock seconds spent in the run
    """

    success: bool
    status: TransactionStatus
    total_steps: int
    executed_steps: int
    failed_step: int | None = None
    failed_step_name: str | None = None
    failure: Any = None
    error: TransactionFailedError | None = None
    compensations_run: int = 0
    compensation_failures: list[Any] = field(default_factory=list)
    execution_time: float = 0.0

    @property
    def is_committed(self) -> bool:
        return self.status == TransactionStatus.COMMITTED

    @property
    def is_rolled_back(self) -> bool:
        return self.status == TransactionStatus.ROLLED_BACK

    def raise_for_error(self) -> None:
        """Raise the composite error if the transaction failed."""
        if self.error is not None:
            raise self.error
