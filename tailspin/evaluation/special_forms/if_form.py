from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tailspin.errors import TailspinTypeError
from tailspin.evaluation.contracts import check_arity_range
from tailspin.evaluation.evaluator import evaluate, evaluate_operand
from tailspin.types.datum import EMPTY_LIST, Datum

if TYPE_CHECKING:
    from tailspin.interpreter import Interpreter


def if_form(interpreter: Interpreter, args: Sequence[Datum]) -> Datum:
    check_arity_range("if", args, 2, 3)

    test = evaluate_operand(args[0], interpreter)
    if test.as_condition() is not None:
        return test
    # No truthiness: the test must be a boolean
    flag = test.as_boolean()
    if flag is None:
        raise TailspinTypeError(
            f"if: argument mismatch: expected bool, got: {interpreter.to_string(test)}"
        )

    if flag:
        return evaluate(args[1], interpreter)
    elif len(args) > 2:
        return evaluate(args[2], interpreter)
    else:
        return EMPTY_LIST
