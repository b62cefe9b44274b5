# ============================================
# FILE: txsaga/core/exceptions.py
# ============================================

"""
All transaction-related exceptions
"""

from typing import Any


class TransactionError(Exception):
    """Base transaction error"""


class MalformedStepError(TransactionError):
    """
    Raised when a step cannot be run by the transaction runner.

    Either the object is not a step at all, or its work callable does not
    declare a failure indicator output. This is a configuration defect and is
    detected before any work executes.
    """

    def __init__(self, step_index: int, step_name: str | None = None, reason: str | None = None):
        self.step_index = step_index
        self.step_name = step_name
        self.reason = reason or "work function must return a failure indicator"

        label = f"step {step_index}"
        if step_name:
            label = f"{label} ({step_name!r})"

        super().__init__(f"{label}: {self.reason}")


class TransactionFailedError(TransactionError):
    """
    Composite error for a transaction stopped by a failing step.

    Renders as the static marker and the wrapped failure joined by a newline:

        transaction failed
        task returned an error: <failure>
    """

    MARKER = "transaction failed"

    def __init__(self, failure: Any, step_index: int | None = None, step_name: str | None = None):
        self.failure = failure
        self.step_index = step_index
        self.step_name = step_name

        super().__init__(f"{self.MARKER}\ntask returned an error: {failure}")
