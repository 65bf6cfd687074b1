from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.errors import TailspinValueError
from tailspin.evaluation.contracts import check_arity, check_arity_min, expect
from tailspin.evaluation.evaluator import evaluate_body, evaluate_operand
from tailspin.types.datum import Datum

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def parse_bindings(form: str, bindings: Datum, interpreter: Interpreter) -> list[tuple[int, Datum]]:
    """
    Accepts both binding layouts:
        ((x 1) (y 2))   nested pairs
        (x 1 y 2)       flat, an even number of items
    """
    items = expect(form, "list", bindings, "as_list", interpreter)
    if not items:
        return []

    if items[0].as_pair() is not None:
        result = []
        for binding in items:
            entry = expect(form, "list", binding, "as_list", interpreter)
            check_arity(f"{form} binding", entry, 2)
            result.append((expect(form, "symbol", entry[0], "as_symbol", interpreter), entry[1]))
        return result

    if len(items) % 2 != 0:
        raise TailspinValueError("bindings must be a list with an even number of objects")
    return [
        (expect(form, "symbol", name, "as_symbol", interpreter), value)
        for name, value in zip(items[::2], items[1::2])
    ]


def _let(form: str, interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    check_arity_min(form, args, 2)
    bindings = parse_bindings(form, args[0], interpreter)

    parent = interpreter.current_scope
    interpreter.current_scope = parent.child()
    try:
        # Sequential: each value sees the bindings before it
        for symbol_id, expr in bindings:
            value = evaluate_operand(expr, interpreter)
            if value.as_condition() is not None:
                return value
            interpreter.current_scope.bind(symbol_id, value)
        return evaluate_body(args[1:], interpreter)
    finally:
        interpreter.current_scope = parent


def let_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(let bindings body...)"""
    return _let("let", interpreter, args)


def let_star_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """(let* bindings body...)"""
    return _let("let*", interpreter, args)
