"""
Transaction steps and the work-signature validator.

A step pairs a work callable with the compensations that undo it. Steps come
in two shapes:

- Step: a frozen dataclass built from plain callables
- Task: an abstract base class for steps that carry their own state

Usage:
    >>> from txsaga import Step, Task
    >>>
    >>> def reserve_seat() -> Exception | None:
    ...     return None
    >>>
    >>> step = Step(reserve_seat, compensations=[release_seat], name="reserve")
    >>>
    >>> class ChargeCard(Task):
    ...     def __init__(self, gateway, amount):
    ...         self.gateway = gateway
    ...         self.amount = amount
    ...
    ...     def run(self) -> Exception | None:
    ...         return self.gateway.charge(self.amount)
    ...
    ...     def compensations(self):
    ...         return [lambda: self.gateway.refund(self.amount)]

The work callable must declare a failure indicator output. An unannotated
callable is taken to return exactly one failure indicator. Annotated callables
must name an exception type in their return annotation, either directly
(`-> Exception | None`) or as one element of a tuple
(`-> tuple[int, Exception | None]`).
"""

from __future__ import annotations

import ast
import builtins
import functools
import inspect
import types
import typing
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from txsaga.types import Compensation, FailureIndicator, Work

_NO_ARGS_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_UNRESOLVED = object()


@dataclass(frozen=True)
class Step:
    """
    One unit of a transaction: a work callable plus its compensations.

    Attributes:
        work: Zero-argument callable returning a failure indicator
        compensations: Zero-argument callables run on rollback, in order
        name: Optional label used in log records and errors
    """

    work: Work
    compensations: tuple[Compensation, ...] = field(default_factory=tuple)
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.compensations, tuple):
            object.__setattr__(self, "compensations", tuple(self.compensations))

    @property
    def label(self) -> str:
        return self.name or getattr(self.work, "__name__", repr(self.work))


class Task(ABC):
    """
    Base class for steps implemented as objects.

    Subclasses implement run() and may override compensations(). The step
    name defaults to the class name; assign self.name to change it.
    """

    _name: str | None = None

    @abstractmethod
    def run(self) -> FailureIndicator:
        """Do the work. Return None on success or a failure indicator."""
        raise NotImplementedError("Subclasses must implement run")

    def compensations(self) -> Sequence[Compensation]:
        """Callables that undo run(), in the order they were registered."""
        return ()

    @property
    def name(self) -> str:
        return self._name or type(self).__name__

    @name.setter
    def name(self, value: str | None) -> None:
        self._name = value

    def to_step(self) -> Step:
        return Step(work=self.run, compensations=tuple(self.compensations()), name=self.name)


def as_step(obj: Any) -> Step | None:
    """Normalise a Step or Task into a Step; anything else gives None."""
    if isinstance(obj, Step):
        return obj
    if isinstance(obj, Task):
        return obj.to_step()
    return None


def locate_failure(work: Any) -> int | None:
    """
    Find the position of the failure indicator among a work callable's outputs.

    Returns:
        The index of the failure indicator (0 for single-value returns), or
        None when the callable cannot be run without arguments or declares no
        failure indicator output.

    Example:
        >>> locate_failure(lambda: None)
        0
        >>> def fetch() -> tuple[dict, Exception | None]: ...
        >>> locate_failure(fetch)
        1
        >>> def fire() -> None: ...
        >>> locate_failure(fire) is None
        True
    """
    shape = _failure_shape(work)
    return None if shape is None else shape[0]


def is_tuple_result(work: Any) -> bool:
    """True when the failure indicator is one element of a tuple return."""
    shape = _failure_shape(work)
    return shape is not None and shape[1]


def extract_failure(work: Any, result: Any, position: int) -> Any:
    """Read the failure indicator out of a work callable's return value."""
    if is_tuple_result(work) and isinstance(result, tuple) and len(result) > position:
        return result[position]
    return result


def _failure_shape(work: Any) -> tuple[int, bool] | None:
    """(failure position, returns a tuple) or None when there is no failure output."""
    if not callable(work):
        return None

    try:
        signature = _signature(work)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures
        return 0, False

    if not _accepts_no_arguments(signature):
        return None

    annotation = signature.return_annotation
    if annotation is inspect.Signature.empty:
        return 0, False
    if isinstance(annotation, str):
        return _string_shape(annotation, _namespace(work))
    if annotation is None or annotation is type(None):
        return None
    if _is_failure_type(annotation, allow_any=True):
        return 0, False

    if typing.get_origin(annotation) is tuple:
        for position, element in enumerate(typing.get_args(annotation)):
            if element is not Ellipsis and _is_failure_type(element):
                return position, True

    return None


def _accepts_no_arguments(signature: inspect.Signature) -> bool:
    return all(
        param.default is not inspect.Parameter.empty or param.kind in _NO_ARGS_KINDS
        for param in signature.parameters.values()
    )


def _signature(work: Any) -> inspect.Signature:
    try:
        return inspect.signature(work, eval_str=True)
    except (NameError, SyntaxError, AttributeError):
        # Some names only exist for type checkers; read the strings instead
        return inspect.signature(work)


def _is_failure_type(annotation: Any, allow_any: bool = False) -> bool:
    # Any only counts for single-value returns; tuple positions need a real exception type
    if annotation is typing.Any:
        return allow_any
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(_is_failure_type(arg, allow_any) for arg in typing.get_args(annotation))
    if origin is not None:
        return False
    return isinstance(annotation, type) and issubclass(annotation, BaseException)


# String annotations that could not be evaluated as a whole. Each name is
# resolved on its own; names that do not resolve are plain values.


def _string_shape(annotation: str, namespace: dict[str, Any]) -> tuple[int, bool] | None:
    try:
        node = ast.parse(annotation, mode="eval").body
    except SyntaxError:
        return None

    if isinstance(node, ast.Constant) and node.value is None:
        return None
    if _node_is_failure(node, namespace, allow_any=True):
        return 0, False

    if isinstance(node, ast.Subscript):
        origin = _resolve(node.value, namespace)
        if origin is tuple or origin is typing.Tuple:
            for position, element in enumerate(_subscript_members(node)):
                if _node_is_failure(element, namespace):
                    return position, True

    return None


def _node_is_failure(node: ast.expr, namespace: dict[str, Any], allow_any: bool = False) -> bool:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _node_is_failure(node.left, namespace, allow_any) or _node_is_failure(
            node.right, namespace, allow_any
        )

    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        try:
            inner = ast.parse(node.value, mode="eval").body
        except SyntaxError:
            return False
        return _node_is_failure(inner, namespace, allow_any)

    if isinstance(node, ast.Subscript):
        origin = _resolve(node.value, namespace)
        if origin is typing.Optional or origin is typing.Union:
            return any(
                _node_is_failure(member, namespace, allow_any)
                for member in _subscript_members(node)
            )
        return False

    resolved = _resolve(node, namespace)
    if resolved is _UNRESOLVED:
        return False
    return _is_failure_type(resolved, allow_any)


def _subscript_members(node: ast.Subscript) -> list[ast.expr]:
    if isinstance(node.slice, ast.Tuple):
        return list(node.slice.elts)
    return [node.slice]


def _resolve(node: ast.expr, namespace: dict[str, Any]) -> Any:
    if isinstance(node, ast.Name):
        if node.id in namespace:
            return namespace[node.id]
        return getattr(builtins, node.id, _UNRESOLVED)
    if isinstance(node, ast.Attribute):
        base = _resolve(node.value, namespace)
        if base is _UNRESOLVED:
            return _UNRESOLVED
        return getattr(base, node.attr, _UNRESOLVED)
    return _UNRESOLVED


def _namespace(work: Any) -> dict[str, Any]:
    """Module globals the work callable's annotations were written against."""
    target = work
    while isinstance(target, functools.partial):
        target = target.func
    if not inspect.isroutine(target):
        target = getattr(type(target), "__call__", target)
    target = inspect.unwrap(getattr(target, "__func__", target))
    return getattr(target, "__globals__", {})
