"""
Sequential transaction runner.

Runs steps one after another. The first step whose work reports a failure
stops the transaction; the compensations of every step run so far, the failing
step's own included, are then invoked most-recent-first.

Usage:
    >>> from txsaga import Step, commit
    >>>
    >>> commit(
    ...     Step(create_order, compensations=[cancel_order]),
    ...     Step(charge_card, compensations=[refund_card]),
    ...     Step(ship_order),
    ... )

    If charge_card fails, refund_card then cancel_order run, and commit raises:

        transaction failed
        task returned an error: card declined
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from txsaga.core.exceptions import MalformedStepError, TransactionFailedError
from txsaga.core.logger import get_logger
from txsaga.core.step import Step, Task, as_step, extract_failure, locate_failure
from txsaga.types import TransactionResult, TransactionStatus


def validate(*steps: Step | Task) -> None:
    """
    Check every step before anything runs.

    Raises:
        MalformedStepError: A step is not a Step/Task, or its work declares
            no failure indicator output
    """
    _prepare(steps)


def _prepare(steps: tuple[Any, ...]) -> list[Step]:
    prepared = []
    for index, candidate in enumerate(steps):
        step = as_step(candidate)
        if step is None:
            raise MalformedStepError(
                index, reason=f"expected a Step or Task, got {type(candidate).__name__}"
            )
        if locate_failure(step.work) is None:
            raise MalformedStepError(index, step.name)
        prepared.append(step)
    return prepared


def run(*steps: Step | Task) -> TransactionResult:
    """
    Run a transaction and report what happened.

    Step failures are reported on the result rather than raised; use commit()
    for raise-on-failure behaviour.

    Raises:
        MalformedStepError: From the validation pass; nothing has run
    """
    log = get_logger(__name__)
    prepared = _prepare(steps)
    started = time.perf_counter()

    failed_at: int | None = None
    failure: Any = None
    executed = 0

    for index, step in enumerate(prepared):
        position = locate_failure(step.work)
        if position is None:
            break

        log.debug(f"Step {index} ({step.label}) starting")
        executed += 1
        try:
            result = step.work()
        except Exception as e:
            failure = e
        else:
            failure = extract_failure(step.work, result, position)

        if failure is not None:
            failed_at = index
            log.warning(f"Step {index} ({step.label}) failed: {failure}")
            break

        log.debug(f"Step {index} ({step.label}) succeeded")

    if failed_at is None:
        log.info(f"Transaction committed: {executed} step(s)")
        return TransactionResult(
            success=True,
            status=TransactionStatus.COMMITTED,
            total_steps=len(prepared),
            executed_steps=executed,
            execution_time=time.perf_counter() - started,
        )

    # Steps 0..failed_at inclusive: the failing step's compensations run too
    pending = [comp for step in prepared[: failed_at + 1] for comp in step.compensations]
    compensation_failures = _compensate(pending, log)

    failed_step = prepared[failed_at]
    log.info(
        f"Transaction rolled back at step {failed_at} ({failed_step.label}): "
        f"{len(pending)} compensation(s) run"
    )

    error = TransactionFailedError(failure, step_index=failed_at, step_name=failed_step.name)
    if isinstance(failure, BaseException):
        error.__cause__ = failure

    return TransactionResult(
        success=False,
        status=TransactionStatus.ROLLED_BACK,
        total_steps=len(prepared),
        executed_steps=executed,
        failed_step=failed_at,
        failed_step_name=failed_step.name,
        failure=failure,
        error=error,
        compensations_run=len(pending),
        compensation_failures=compensation_failures,
        execution_time=time.perf_counter() - started,
    )


def _compensate(pending: list[Callable[[], Any]], log: Any) -> list[Any]:
    """Invoke compensations last-collected-first. Their failures never escalate."""
    failures = []
    for compensation in reversed(pending):
        name = getattr(compensation, "__name__", repr(compensation))
        log.debug(f"Compensating: {name}")
        try:
            outcome = compensation()
        except Exception as e:
            outcome = e

        if outcome is not None:
            log.warning(f"Compensation {name} failed (ignored): {outcome}")
            failures.append(outcome)
    return failures


def commit(*steps: Step | Task) -> None:
    """
    Run a transaction, raising if any step fails.

    Raises:
        MalformedStepError: A step is malformed; no work has run
        TransactionFailedError: A step failed; compensations have run
    """
    result = run(*steps)
    if result.error is not None:
        raise result.error


class Transaction:
    """
    Builder for an ordered list of steps.

    Example:
        >>> tx = (
        ...     Transaction(name="checkout")
        ...     .add_step(reserve_stock, release_stock)
        ...     .add_step(charge_card, refund_card, name="charge")
        ... )
        >>> tx.commit()

    The builder only holds steps; every run() or commit() is independent.
    """

    def __init__(self, name: str | None = None, steps: list[Step | Task] | None = None):
        self.name = name
        self._steps: list[Step | Task] = list(steps or [])

    def add_step(
        self, work: Callable[[], Any], *compensations: Callable[[], Any], name: str | None = None
    ) -> Transaction:
        self._steps.append(Step(work=work, compensations=compensations, name=name))
        return self

    def add(self, step: Step | Task) -> Transaction:
        self._steps.append(step)
        return self

    @property
    def steps(self) -> tuple[Step | Task, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Transaction(name={self.name!r}, steps={len(self._steps)})"

    def validate(self) -> None:
        validate(*self._steps)

    def run(self) -> TransactionResult:
        return run(*self._steps)

    def commit(self) -> None:
        commit(*self._steps)
