"""loop / recur.

`(loop bindings body...)` binds like let* and runs its body on the
trampoline. `(recur args...)` evaluates its arguments and hands them back as
a RecurSignal; the nearest enclosing loop or procedure body rebinds its
variables to them and runs again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.evaluation.contracts import check_arity_min, eager
from tailspin.evaluation.evaluator import evaluate_operand, run_trampoline
from tailspin.evaluation.special_forms.let_forms import parse_bindings
from tailspin.types.datum import Datum, recur_signal

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def loop_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    check_arity_min("loop", args, 2)
    bindings = parse_bindings("loop", args[0], interpreter)

    parent = interpreter.current_scope
    interpreter.current_scope = parent.child()
    values: list[Datum] = []
    try:
        for symbol_id, expr in bindings:
            value = evaluate_operand(expr, interpreter)
            if value.as_condition() is not None:
                return value
            interpreter.current_scope.bind(symbol_id, value)
            values.append(value)
    finally:
        interpreter.current_scope = parent

    binders = [symbol_id for symbol_id, _ in bindings]
    return run_trampoline(interpreter, parent, binders, values, args[1:], "loop")


@eager
def recur_form(interpreter: Interpreter, args: list[Datum]) -> Datum:
    interpreter.recur_pending = True
    return recur_signal(args)
