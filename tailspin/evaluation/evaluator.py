"""Core evaluator and trampoline for the Tailspin interpreter.

`evaluate` turns one Datum into its value in the interpreter's current scope.
Application dispatches on the callable kind: natives receive their raw
argument expressions, closures receive evaluated arguments and run their body
through `run_trampoline`, which also drives `loop`. A `recur` in tail
position yields a RecurSignal that the nearest trampoline consumes by
rebinding its variables in a fresh frame, so iteration never grows the host
stack.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from tailspin.errors import TailspinConditionError
from tailspin.types.datum import EMPTY_LIST, Datum, condition_message
from tailspin.types.environment import Environment
from tailspin.types.procedure import NativeProcedure, Procedure

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter

log = logging.getLogger("Evaluator")

RECUR_NOT_IN_TAIL = "recur in non-tail position"


def arity_message(name: str, expected: str, got: int) -> str:
    return f"arity mismatch for {name}: expected: {expected}, got: {got}"


def evaluate(datum: Datum, interpreter: Interpreter) -> Datum:
    """Evaluate `datum` in `interpreter.current_scope`. Never raises for
    user-level errors; they come back as Condition values."""
    if interpreter.recur_pending:
        return condition_message(RECUR_NOT_IN_TAIL)

    symbol_id = datum.as_symbol()
    if symbol_id is not None:
        value = interpreter.current_scope.lookup(symbol_id)
        if value is None:
            return condition_message(f"undefined identifier: {interpreter.to_string(datum)}")
        return value

    cell = datum.as_pair()
    if cell is not None:
        head, rest = cell
        raw_args = rest.as_list()
        if raw_args is None:
            return condition_message(
                f"cannot evaluate dotted form: {interpreter.to_string(datum)}"
            )
        callee = evaluate(head, interpreter)
        if callee.as_condition() is not None:
            return callee
        return apply(callee, raw_args, interpreter)

    if datum.as_empty_list() is not None:
        return condition_message("cannot evaluate ()")

    # Everything else self-evaluates
    return datum


def apply(callee: Datum, raw_args: Sequence[Datum], interpreter: Interpreter) -> Datum:
    """Apply an evaluated callee to the raw argument expressions of its call site."""
    native = callee.as_native()
    if native is not None:
        return call_native(native, raw_args, interpreter)

    procedure = callee.as_procedure()
    if procedure is not None:
        return apply_procedure(procedure, raw_args, interpreter)

    if callee.as_recur() is not None:
        interpreter.recur_pending = False
        return condition_message(RECUR_NOT_IN_TAIL)
    return condition_message(f"not callable: {interpreter.to_string(callee)}")


def call_native(native: NativeProcedure, raw_args: Sequence[Datum], interpreter: Interpreter) -> Datum:
    try:
        return native.fn(interpreter, raw_args)
    except TailspinConditionError as err:
        log.debug("Native %s signalled: %s", native.name, err)
        return condition_message(str(err))


def evaluate_operand(raw: Datum, interpreter: Interpreter) -> Datum:
    """Evaluate an expression whose value is consumed, so a RecurSignal is an error."""
    value = evaluate(raw, interpreter)
    if value.as_recur() is not None:
        interpreter.recur_pending = False
        return condition_message(RECUR_NOT_IN_TAIL)
    return value


def evaluate_operands(raw_args: Sequence[Datum], interpreter: Interpreter) -> list[Datum] | Datum:
    """Evaluate operands left to right in the current scope.

    Returns the list of values, or the first Condition encountered (the
    remaining operands are not evaluated).
    """
    values: list[Datum] = []
    for raw in raw_args:
        value = evaluate_operand(raw, interpreter)
        if value.as_condition() is not None:
            return value
        values.append(value)
    return values


def apply_procedure(procedure: Procedure, raw_args: Sequence[Datum], interpreter: Interpreter) -> Datum:
    # Conditions bind like any other value here
    values = [evaluate_operand(raw, interpreter) for raw in raw_args]
    if len(values) != len(procedure.params):
        return condition_message(
            arity_message(procedure.display_name, str(len(procedure.params)), len(values))
        )
    return run_trampoline(
        interpreter,
        procedure.scope,
        procedure.params,
        values,
        procedure.body,
        procedure.display_name,
    )


def evaluate_body(body: Sequence[Datum], interpreter: Interpreter) -> Datum:
    """Evaluate expressions in order and return the last value.

    A Condition stops the sequence. A RecurSignal is only passed through when
    it comes from the last expression.
    """
    result: Datum = EMPTY_LIST
    last = len(body) - 1
    for index, expr in enumerate(body):
        result = evaluate(expr, interpreter)
        if result.as_condition() is not None:
            return result
        if index != last and result.as_recur() is not None:
            interpreter.recur_pending = False
            return condition_message(RECUR_NOT_IN_TAIL)
    return result


def run_trampoline(
    interpreter: Interpreter,
    parent: Environment,
    binders: Sequence[int],
    values: Sequence[Datum],
    body: Sequence[Datum],
    name: str,
) -> Datum:
    """Bind `binders` to `values` in a child of `parent`, run `body`, and
    rebind and rerun for as long as the body ends in a RecurSignal.

    The caller's scope is restored on every exit path.
    """
    caller_scope = interpreter.current_scope
    try:
        while True:
            frame = parent.child()
            frame.update(dict(zip(binders, values)))
            interpreter.current_scope = frame

            result = evaluate_body(body, interpreter)
            args = result.as_recur()
            if args is None:
                return result

            interpreter.recur_pending = False
            if len(args) != len(binders):
                return condition_message(arity_message(name, str(len(binders)), len(args)))
            values = args
    finally:
        interpreter.current_scope = caller_scope
