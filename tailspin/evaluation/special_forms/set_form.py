"""Rebinding forms.

None of these mutate a Datum in place. `set!` rebinds an already bound
symbol, `set-car!` and `set-cdr!` rebind a symbol holding a pair to a new
pair with one side replaced. Other holders of the old pair keep seeing it
unchanged, so the value graph stays acyclic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.errors import TailspinValueError
from tailspin.evaluation.contracts import check_arity, expect
from tailspin.evaluation.evaluator import evaluate_operand
from tailspin.types.datum import Datum, pair

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def set_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(set! name expr): rebind `name`, which must already be bound somewhere."""
    check_arity("set!", args, 2)
    symbol_id = expect("set!", "symbol", args[0], "as_symbol", interpreter)
    if interpreter.current_scope.lookup(symbol_id) is None:
        raise TailspinValueError(f"set!: unknown identifier {interpreter.to_string(args[0])}")

    value = evaluate_operand(args[1], interpreter)
    if value.as_condition() is not None:
        return value
    interpreter.current_scope.bind(symbol_id, value)
    return args[0]


def _replace_in_pair(form: str, interpreter: Interpreter, args: Sequence[Datum], replace_head: bool) -> Datum:
    check_arity(form, args, 2)
    symbol_id = expect(form, "symbol", args[0], "as_symbol", interpreter)

    current = evaluate_operand(args[0], interpreter)
    if current.as_condition() is not None:
        return current
    head, tail = expect(form, "pair", current, "as_pair", interpreter)

    value = evaluate_operand(args[1], interpreter)
    if value.as_condition() is not None:
        return value

    interpreter.current_scope.bind(symbol_id, pair(value, tail) if replace_head else pair(head, value))
    return args[0]


def set_car_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(set-car! name expr)"""
    return _replace_in_pair("set-car!", interpreter, args, replace_head=True)


def set_cdr_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(set-cdr! name expr)"""
    return _replace_in_pair("set-cdr!", interpreter, args, replace_head=False)
