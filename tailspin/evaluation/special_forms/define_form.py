from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.errors import TailspinTypeError
from tailspin.evaluation.contracts import check_arity, check_arity_min, expect
from tailspin.evaluation.evaluator import evaluate_operand
from tailspin.evaluation.special_forms.lambda_form import make_procedure, parse_params
from tailspin.types.datum import Datum, make_list, symbol

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def define_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    """
    (define name expr)             bind the value of expr
    (define (name params...) body) bind a named procedure

    Binds in the innermost frame and returns the defined symbol.
    """
    check_arity_min("define", args, 2)
    target = args[0]

    symbol_id = target.as_symbol()
    if symbol_id is not None:
        check_arity("define", args, 2)
        value = evaluate_operand(args[1], interpreter)
        if value.as_condition() is not None:
            return value
        interpreter.current_scope.bind(symbol_id, value)
        return target

    signature = target.as_list()
    if not signature:
        raise TailspinTypeError(
            f"define expected symbol, got: {interpreter.to_string(target)}"
        )
    name_id = expect("define", "symbol", signature[0], "as_symbol", interpreter)
    params = parse_params("define", make_list(signature[1:]), interpreter)
    procedure = make_procedure(
        interpreter, interpreter.symbols.lookup(name_id), params, args[1:]
    )
    # The procedure's scope is the frame it is bound in, so it can call itself
    interpreter.current_scope.bind(name_id, procedure)
    return symbol(name_id)
