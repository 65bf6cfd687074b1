"""Argument contracts shared by native procedures.

Natives raise TailspinArityError / TailspinTypeError from these helpers; the
native call site turns the exception into a Condition.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from tailspin import NativeFn
from tailspin.errors import TailspinArityError, TailspinTypeError
from tailspin.evaluation.evaluator import arity_message, evaluate_operands
from tailspin.types.datum import Datum

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def check_arity(name: str, args: Sequence[Datum], expected: int) -> None:
    if len(args) != expected:
        raise TailspinArityError(arity_message(name, str(expected), len(args)))


def check_arity_range(name: str, args: Sequence[Datum], low: int, high: int) -> None:
    if not low <= len(args) <= high:
        raise TailspinArityError(arity_message(name, f"{low}..{high}", len(args)))


def check_arity_min(name: str, args: Sequence[Datum], low: int) -> None:
    if len(args) < low:
        raise TailspinArityError(arity_message(name, f"{low}..", len(args)))


def expect(
    name: str,
    kind: str,
    value: Datum,
    accessor: str,
    interpreter: Optional[Interpreter] = None,
) -> Any:
    """Unwrap `value` with the Datum accessor named `accessor` (e.g. "as_integer").

    Raises TailspinTypeError naming the procedure, the expected kind and the
    printed value when the tag does not match.
    """
    unwrapped = getattr(value, accessor)()
    if unwrapped is None:
        printed = interpreter.to_string(value) if interpreter is not None else str(value)
        raise TailspinTypeError(f"{name} expected {kind}, got: {printed}")
    return unwrapped


def eager(fn: Callable[[Interpreter, list[Datum]], Datum]) -> NativeFn:
    """Wrap a primitive so it receives evaluated operands.

    Operands are evaluated left to right; the first Condition is returned
    without calling the primitive.
    """

    @functools.wraps(fn)
    def wrapper(interpreter: Interpreter, raw_args: Sequence[Datum]) -> Datum:
        values = evaluate_operands(raw_args, interpreter)
        if isinstance(values, Datum):
            return values
        return fn(interpreter, values)

    return wrapper
